"""
Crew Center URL Configuration
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.db import connection
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from apps.discord.api.views import InteractionsView


def health_check(request):
    """Basic health check endpoint."""
    return JsonResponse({
        'status': 'healthy',
        'service': settings.SERVICE_NAME,
        'version': settings.SERVICE_VERSION,
    })


def readiness_check(request):
    """Readiness check with database connectivity."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        db_status = 'connected'
    except Exception as e:
        db_status = f'error: {str(e)}'

    is_ready = db_status == 'connected'

    return JsonResponse({
        'status': 'ready' if is_ready else 'not_ready',
        'service': settings.SERVICE_NAME,
        'checks': {
            'database': db_status,
        }
    }, status=200 if is_ready else 503)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health_check, name='health_check'),
    path('ready/', readiness_check, name='readiness_check'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('discord/interactions/', InteractionsView.as_view(), name='discord-interactions'),
    path('api/v1/', include('apps.pilots.api.urls')),
    path('api/v1/', include('apps.operations.api.urls')),
    path('api/v1/', include('apps.academy.api.urls')),
    path('api/v1/', include('apps.content.api.urls')),
    path('api/v1/discord/', include('apps.discord.api.urls')),
]
