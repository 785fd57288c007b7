"""WSGI entrypoint for the DormHive backend."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dormhive.settings')

application = get_wsgi_application()
