from django.contrib import admin

from .models import (
    Aircraft,
    Route,
    MultiplierConfig,
    Pirep,
    RouteOfWeek,
    DailyFeaturedRoute,
    Challenge,
    ChallengeCompletion,
    Event,
    EventRegistration,
)


@admin.register(Aircraft)
class AircraftAdmin(admin.ModelAdmin):
    list_display = ['icao_code', 'name', 'livery', 'min_rank']


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ['route_number', 'dep_icao', 'arr_icao', 'aircraft_icao', 'route_type', 'is_active']
    list_filter = ['route_type', 'is_active']
    search_fields = ['route_number', 'dep_icao', 'arr_icao']


@admin.register(MultiplierConfig)
class MultiplierConfigAdmin(admin.ModelAdmin):
    list_display = ['name', 'value', 'is_active']


@admin.register(Pirep)
class PirepAdmin(admin.ModelAdmin):
    list_display = ['flight_number', 'pilot', 'dep_icao', 'arr_icao', 'flight_hours', 'status', 'source']
    list_filter = ['status', 'source', 'flight_type']


@admin.register(RouteOfWeek)
class RouteOfWeekAdmin(admin.ModelAdmin):
    list_display = ['week_start', 'day_of_week', 'route']


@admin.register(DailyFeaturedRoute)
class DailyFeaturedRouteAdmin(admin.ModelAdmin):
    list_display = ['featured_date', 'route']


@admin.register(Challenge)
class ChallengeAdmin(admin.ModelAdmin):
    list_display = ['name', 'destination_icao', 'is_active']


@admin.register(ChallengeCompletion)
class ChallengeCompletionAdmin(admin.ModelAdmin):
    list_display = ['challenge', 'pilot', 'status', 'completed_at']
    list_filter = ['status']


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['name', 'dep_icao', 'arr_icao', 'start_time', 'is_active']


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ['event', 'pilot', 'assigned_dep_gate', 'assigned_arr_gate']
