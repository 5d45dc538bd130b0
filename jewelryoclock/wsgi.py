"""
WSGI config for the Jewelry O'Clock project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'jewelryoclock.settings')

application = get_wsgi_application()
