import os
from celery import Celery

# Default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dormhive.settings')

app = Celery('dormhive')

# Read config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Autodiscover tasks from installed apps
app.autodiscover_tasks()
