# jewelryoclock/presentation/views_auth.py
"""Autenticação por sessão (login/cadastro/logout) e o usuário atual."""
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from jewelryoclock.core.dependency_injection import get_identity_gate

from .serializers import LoginSerializer, RegisterSerializer


def _user_payload(user):
    return {'id': user.id, 'name': user.name, 'email': user.email, 'role': user.role.value}


def _auth_response(gate, result, success_status=status.HTTP_200_OK):
    if not result.success:
        return Response({'success': False, 'error': result.error}, status=status.HTTP_400_BAD_REQUEST)
    user = gate.current_user()
    return Response({'success': True, 'user': _user_payload(user) if user else None}, status=success_status)


class LoginAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        gate = get_identity_gate(request)
        result = gate.login(serializer.validated_data['email'], serializer.validated_data['password'])
        return _auth_response(gate, result)


class RegisterAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        gate = get_identity_gate(request)
        result = gate.register(data['name'], data['email'], data['password'])
        return _auth_response(gate, result, success_status=status.HTTP_201_CREATED)


class FederatedSignInAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        gate = get_identity_gate(request)
        result = gate.federated_sign_in(domain=request.get_host())
        return _auth_response(gate, result)


class LogoutAPIView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        get_identity_gate(request).sign_out()
        return Response({'success': True})


class MeAPIView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        user = get_identity_gate(request).current_user()
        if user is None:
            return Response({'authenticated': False})
        return Response({'authenticated': True, 'user': _user_payload(user)})
