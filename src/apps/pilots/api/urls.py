# src/apps/pilots/api/urls.py
"""
Pilot API URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    PilotViewSet,
    RankConfigViewSet,
    BonusTierViewSet,
    UserRoleViewSet,
    AuthIdentityViewSet,
    AdminSetupView,
    PilotApplicationViewSet,
    LeaveOfAbsenceViewSet,
)

router = DefaultRouter()
router.register(r'pilots', PilotViewSet, basename='pilot')
router.register(r'ranks', RankConfigViewSet, basename='rank')
router.register(r'bonus-tiers', BonusTierViewSet, basename='bonus-tier')
router.register(r'roles', UserRoleViewSet, basename='role')
router.register(r'identities', AuthIdentityViewSet, basename='identity')
router.register(r'applications', PilotApplicationViewSet, basename='application')
router.register(r'loa', LeaveOfAbsenceViewSet, basename='loa')

urlpatterns = [
    path('admin/setup/', AdminSetupView.as_view(), name='admin-setup'),
    path('', include(router.urls)),
]

# API URL Patterns Summary:
#
# Pilots:
#   GET         /api/v1/pilots/
#   GET/PATCH   /api/v1/pilots/{id}/
#   GET/PATCH   /api/v1/pilots/me/
#   GET         /api/v1/pilots/leaderboard/
#   GET         /api/v1/pilots/{id}/activity/
#   GET         /api/v1/pilots/{id}/bonus-card/
#   GET         /api/v1/pilots/{id}/streak/
#
# Reference data:
#   GET/POST    /api/v1/ranks/
#   GET/POST    /api/v1/bonus-tiers/
#   GET/POST    /api/v1/roles/
#   GET/POST    /api/v1/identities/
#
# Applications:
#   GET/POST    /api/v1/applications/
#   POST        /api/v1/applications/{id}/approve/
#   POST        /api/v1/applications/{id}/reject/
#   GET         /api/v1/applications/next-pid/
#
# Leave of absence:
#   GET/POST    /api/v1/loa/
#   POST        /api/v1/loa/{id}/approve/
#   POST        /api/v1/loa/{id}/deny/
#
# Admin:
#   POST        /api/v1/admin/setup/
