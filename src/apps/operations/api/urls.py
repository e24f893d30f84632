# src/apps/operations/api/urls.py
"""
Operations API URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AircraftViewSet,
    RouteViewSet,
    MultiplierConfigViewSet,
    GateLookupView,
    PirepViewSet,
    RouteOfWeekViewSet,
    DailyFeaturedRouteViewSet,
    ChallengeViewSet,
    EventViewSet,
)

router = DefaultRouter()
router.register(r'aircraft', AircraftViewSet, basename='aircraft')
router.register(r'routes', RouteViewSet, basename='route')
router.register(r'multipliers', MultiplierConfigViewSet, basename='multiplier')
router.register(r'pireps', PirepViewSet, basename='pirep')
router.register(r'routes-of-week', RouteOfWeekViewSet, basename='route-of-week')
router.register(r'featured-routes', DailyFeaturedRouteViewSet, basename='featured-route')
router.register(r'challenges', ChallengeViewSet, basename='challenge')
router.register(r'events', EventViewSet, basename='event')

urlpatterns = [
    path('gates/', GateLookupView.as_view(), name='gate-lookup'),
    path('', include(router.urls)),
]

# API URL Patterns Summary:
#
# Fleet:
#   GET/POST    /api/v1/aircraft/
#   GET/POST    /api/v1/routes/
#   GET/POST    /api/v1/multipliers/
#   GET         /api/v1/gates/?icao=&aircraft_icao=
#
# PIREPs:
#   GET/POST    /api/v1/pireps/
#   GET         /api/v1/pireps/{id}/
#   POST        /api/v1/pireps/{id}/review/
#   GET         /api/v1/pireps/mine/
#
# Schedule:
#   GET/POST    /api/v1/routes-of-week/
#   GET         /api/v1/routes-of-week/current/
#   GET/POST    /api/v1/featured-routes/
#   GET         /api/v1/featured-routes/today/
#   GET/POST    /api/v1/challenges/
#   POST        /api/v1/challenges/{id}/accept/
#   GET/POST    /api/v1/events/
#   POST        /api/v1/events/{id}/join/
#   GET         /api/v1/events/upcoming/
#   GET         /api/v1/events/{id}/registrations/
