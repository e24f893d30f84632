"""
Celery application for the crew center background jobs.
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('crew_center')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
