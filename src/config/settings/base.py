"""
Base settings for the AFLV Crew Center
"""

import os
from pathlib import Path
from datetime import timedelta

from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
DEBUG = False
ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

SERVICE_NAME = 'crew-center'
SERVICE_VERSION = os.environ.get('SERVICE_VERSION', '1.0.0')

ROOT_URLCONF = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'

DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'rest_framework',
    'corsheaders',
    'django_filters',
    'drf_spectacular',
    'django_celery_beat',
]

LOCAL_APPS = [
    'apps.pilots',
    'apps.operations',
    'apps.academy',
    'apps.content',
    'apps.discord',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'common.middleware.RequestIDMiddleware',
    'common.middleware.LoggingMiddleware',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'crew_center_db'),
        'USER': os.environ.get('DB_USER', 'crew_center'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'crew_center_password'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': 60,
        'OPTIONS': {
            'connect_timeout': 10,
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
REDIS_PASSWORD = os.environ.get('REDIS_PASSWORD', None)

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {'max_connections': 50, 'retry_on_timeout': True},
            'PASSWORD': REDIS_PASSWORD,
        },
        'KEY_PREFIX': SERVICE_NAME,
        'TIMEOUT': 300,
    },
}

# Celery (using Redis as broker)
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', REDIS_URL)
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', REDIS_URL)
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_TIME_LIMIT = 5 * 60
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_BEAT_SCHEDULER = 'django_celery_beat.schedulers:DatabaseScheduler'

CELERY_BEAT_SCHEDULE = {
    'process-recruitment-retests': {
        'task': 'discord.process_recruitment_retests',
        'schedule': crontab(minute='*/10'),
    },
    'send-event-reminders': {
        'task': 'discord.send_event_reminders',
        'schedule': crontab(minute='*/5'),
    },
    'send-daily-featured-notification': {
        'task': 'discord.send_daily_featured_notification',
        'schedule': crontab(hour=8, minute=0),
    },
}

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'common.authentication.JWTAuthentication',
        'common.authentication.ServiceAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.IsAuthenticated'],
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
        'rest_framework.filters.SearchFilter',
        'rest_framework.filters.OrderingFilter',
    ],
    'DEFAULT_PAGINATION_CLASS': 'common.pagination.StandardPagination',
    'PAGE_SIZE': 20,
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle',
    ],
    'DEFAULT_THROTTLE_RATES': {'anon': '100/hour', 'user': '2000/hour'},
    'EXCEPTION_HANDLER': 'common.exceptions.custom_exception_handler',
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

JWT_SETTINGS = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=1),
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': os.environ.get('JWT_SECRET_KEY', SECRET_KEY),
    'VERIFYING_KEY': os.environ.get('JWT_SECRET_KEY', SECRET_KEY),
    'ISSUER': os.environ.get('JWT_ISSUER', 'aflv-crew-center'),
}

CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', 'http://localhost:3000').split(',')
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_HEADERS = [
    'accept', 'accept-encoding', 'authorization', 'content-type', 'dnt', 'origin',
    'user-agent', 'x-csrftoken', 'x-requested-with', 'x-request-id', 'x-register-secret',
]

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {'standard': {'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'}},
    'handlers': {'console': {'class': 'logging.StreamHandler', 'formatter': 'standard'}},
    'root': {'handlers': ['console'], 'level': 'INFO'},
    'loggers': {
        'django': {'handlers': ['console'], 'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'), 'propagate': False},
        'apps': {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False},
        'common': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
    },
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'AFLV Crew Center API',
    'DESCRIPTION': 'Pilots, PIREPs, routes, academy, events and the recruitment workflow',
    'VERSION': SERVICE_VERSION,
    'SERVE_INCLUDE_SCHEMA': False,
    'COMPONENT_SPLIT_REQUEST': True,
    'SCHEMA_PATH_PREFIX': '/api/v1',
}

SERVICE_AUTH_TOKEN = os.environ.get('SERVICE_AUTH_TOKEN', 'service-auth-token')

FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')
ADMIN_EMAILS = [e.strip().lower() for e in os.environ.get('ADMIN_EMAILS', '').split(',') if e.strip()]

IFATC_GATES_URL = os.environ.get('IFATC_GATES_URL', 'https://ifatc.org/gates')


def _id_list(name, default=''):
    return [v.strip() for v in os.environ.get(name, default).split(',') if v.strip()]


DISCORD = {
    'API_BASE': 'https://discord.com/api/v10',
    'PUBLIC_KEY': os.environ.get('DISCORD_PUBLIC_KEY', ''),
    'BOT_TOKEN': os.environ.get('DISCORD_BOT_TOKEN', ''),
    'APPLICATION_ID': os.environ.get('DISCORD_APPLICATION_ID', ''),
    'REGISTER_SECRET': os.environ.get('DISCORD_REGISTER_SECRET', ''),
    'RECRUITMENTS_CHANNEL_ID': os.environ.get('DISCORD_RECRUITMENTS_CHANNEL_ID', '1474299044091265096'),
    'RECRUITMENTS_CATEGORY_ID': os.environ.get('DISCORD_RECRUITMENTS_CATEGORY_ID', '1426656419758870693'),
    'STAFF_ROLE_ID': os.environ.get('DISCORD_RECRUITMENT_STAFF_ROLE_ID', '1427942885004808263'),
    'REVIEWER_ROLE_ID': os.environ.get('DISCORD_PRACTICAL_REVIEWER_ROLE_ID', '1427942885004808263'),
    'PILOT_GUIDE_CHANNEL_ID': os.environ.get('DISCORD_PILOT_GUIDE_CHANNEL_ID', '1428000030521823293'),
    'EVENT_REMINDER_CHANNEL_ID': os.environ.get('DISCORD_EVENT_REMINDER_CHANNEL_ID', '1427122161570807858'),
    'PASS_ADD_ROLE_IDS': _id_list('DISCORD_PRACTICAL_PASS_ADD_ROLE_IDS', '1427945161840787518,1427945314077118474,1427945404514963506'),
    'PASS_REMOVE_ROLE_IDS': _id_list('DISCORD_PRACTICAL_PASS_REMOVE_ROLE_IDS', '1432355201326518373,1427947293427892234'),
    'WEBHOOKS': {
        'default': os.environ.get('DISCORD_WEBHOOK_URL', ''),
        'new_pirep': os.environ.get('DISCORD_WEBHOOK_PIREP', ''),
        'featured_route': os.environ.get('DISCORD_WEBHOOK_FEATURED', ''),
        'new_challenge': os.environ.get('DISCORD_WEBHOOK_CHALLENGES', ''),
        'rank_promotion': os.environ.get('DISCORD_WEBHOOK_RANK', ''),
    },
}
