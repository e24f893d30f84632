from django.contrib import admin

from .models import (
    Pilot,
    RankConfig,
    PilotStreak,
    UserRole,
    AuthIdentity,
    ApprovedAdminEmail,
    PilotApplication,
    LeaveOfAbsence,
    BonusTier,
    PilotBonusCard,
)


@admin.register(Pilot)
class PilotAdmin(admin.ModelAdmin):
    list_display = ['pid', 'full_name', 'current_rank', 'total_hours', 'total_pireps']
    list_filter = ['current_rank']
    search_fields = ['pid', 'full_name', 'discord_username']


@admin.register(RankConfig)
class RankConfigAdmin(admin.ModelAdmin):
    list_display = ['name', 'label', 'min_hours', 'max_hours', 'order_index', 'is_active']


@admin.register(PilotStreak)
class PilotStreakAdmin(admin.ModelAdmin):
    list_display = ['pilot', 'current_streak', 'longest_streak', 'last_pirep_date']


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ['user_id', 'role']
    list_filter = ['role']


@admin.register(AuthIdentity)
class AuthIdentityAdmin(admin.ModelAdmin):
    list_display = ['provider', 'provider_id', 'username', 'user_id']
    search_fields = ['provider_id', 'username']


admin.site.register(ApprovedAdminEmail)


@admin.register(PilotApplication)
class PilotApplicationAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'status', 'assigned_pid', 'created_at']
    list_filter = ['status']


@admin.register(LeaveOfAbsence)
class LeaveOfAbsenceAdmin(admin.ModelAdmin):
    list_display = ['pilot', 'start_date', 'end_date', 'status']
    list_filter = ['status']


@admin.register(BonusTier)
class BonusTierAdmin(admin.ModelAdmin):
    list_display = ['name', 'min_hours', 'sort_order', 'is_active']


@admin.register(PilotBonusCard)
class PilotBonusCardAdmin(admin.ModelAdmin):
    list_display = ['pilot', 'card_number']
