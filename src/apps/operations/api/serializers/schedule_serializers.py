# src/apps/operations/api/serializers/schedule_serializers.py
"""
Schedule Serializers

Routes of the week, featured routes, challenges and events.
"""

from rest_framework import serializers

from ...models import (
    DAY_NAMES,
    Route,
    RouteOfWeek,
    DailyFeaturedRoute,
    Challenge,
    ChallengeCompletion,
    Event,
    EventRegistration,
)
from .fleet_serializers import RouteSerializer


class RouteOfWeekSerializer(serializers.ModelSerializer):
    route = RouteSerializer(read_only=True)
    route_id = serializers.PrimaryKeyRelatedField(
        queryset=Route.objects.all(), source='route', write_only=True
    )
    day_name = serializers.SerializerMethodField()

    class Meta:
        model = RouteOfWeek
        fields = ['id', 'week_start', 'day_of_week', 'day_name', 'route', 'route_id']
        # Posting an existing day replaces its route
        validators = []

    def get_day_name(self, obj) -> str:
        return DAY_NAMES[obj.day_of_week]


class DailyFeaturedRouteSerializer(serializers.ModelSerializer):
    route = RouteSerializer(read_only=True)
    route_id = serializers.PrimaryKeyRelatedField(
        queryset=Route.objects.all(), source='route', write_only=True
    )

    class Meta:
        model = DailyFeaturedRoute
        fields = ['id', 'featured_date', 'route', 'route_id']


class FeatureRoutesSerializer(serializers.Serializer):
    featured_date = serializers.DateField()
    route_ids = serializers.PrimaryKeyRelatedField(queryset=Route.objects.all(), many=True)


class ChallengeSerializer(serializers.ModelSerializer):

    class Meta:
        model = Challenge
        fields = ['id', 'name', 'description', 'destination_icao', 'image_url', 'is_active', 'created_at']
        read_only_fields = ['id', 'created_at']


class ChallengeCompletionSerializer(serializers.ModelSerializer):
    challenge_name = serializers.CharField(source='challenge.name', read_only=True)

    class Meta:
        model = ChallengeCompletion
        fields = ['id', 'challenge', 'challenge_name', 'pilot', 'status', 'pirep', 'completed_at']


class EventSerializer(serializers.ModelSerializer):
    registration_count = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            'id',
            'name',
            'description',
            'dep_icao',
            'arr_icao',
            'server',
            'start_time',
            'end_time',
            'available_dep_gates',
            'available_arr_gates',
            'aircraft_icao',
            'aircraft_name',
            'banner_url',
            'is_active',
            'registration_count',
        ]

    def get_registration_count(self, obj) -> int:
        return obj.registrations.count()

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': 'End time must be after the start time'})
        return attrs


class EventRegistrationSerializer(serializers.ModelSerializer):
    pilot_pid = serializers.CharField(source='pilot.pid', read_only=True)
    pilot_name = serializers.CharField(source='pilot.full_name', read_only=True)

    class Meta:
        model = EventRegistration
        fields = [
            'id',
            'event',
            'pilot',
            'pilot_pid',
            'pilot_name',
            'assigned_dep_gate',
            'assigned_arr_gate',
            'discord_user_id',
            'created_at',
        ]
