# jewelryoclock/presentation/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from . import views, views_admin, views_auth

app_name = 'store'

urlpatterns = [
    # Catálogo
    path('products/', views.ProductListAPIView.as_view(), name='product-list'),
    path('products/<str:product_id>/', views.ProductDetailAPIView.as_view(), name='product-detail'),

    # Carrinho e checkout
    path('cart/', views.CartAPIView.as_view(), name='cart'),
    path('cart/<str:line_item_id>/', views.CartItemAPIView.as_view(), name='cart-item'),
    path('checkout/', views.CheckoutAPIView.as_view(), name='checkout'),
    path('orders/', views.MyOrdersAPIView.as_view(), name='my-orders'),
    path('orders/last/', views.LastOrderAPIView.as_view(), name='last-order'),

    # Autenticação
    path('auth/login/', views_auth.LoginAPIView.as_view(), name='login'),
    path('auth/register/', views_auth.RegisterAPIView.as_view(), name='register'),
    path('auth/federated/', views_auth.FederatedSignInAPIView.as_view(), name='federated-sign-in'),
    path('auth/logout/', views_auth.LogoutAPIView.as_view(), name='logout'),
    path('auth/me/', views_auth.MeAPIView.as_view(), name='me'),
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain-pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # Administração
    path('admin/products/', views_admin.AdminProductListAPIView.as_view(), name='admin-products'),
    path('admin/products/suggest-description/', views_admin.DescriptionSuggestionAPIView.as_view(),
         name='admin-suggest-description'),
    path('admin/products/<str:product_id>/', views_admin.AdminProductDetailAPIView.as_view(),
         name='admin-product-detail'),
    path('admin/orders/', views_admin.AdminOrderListAPIView.as_view(), name='admin-orders'),
    path('admin/orders/<str:order_id>/status/', views_admin.AdminOrderStatusAPIView.as_view(),
         name='admin-order-status'),
]
