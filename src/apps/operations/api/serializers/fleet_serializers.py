# src/apps/operations/api/serializers/fleet_serializers.py
from rest_framework import serializers

from ...models import Aircraft, Route, MultiplierConfig


class AircraftSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Aircraft
        fields = [
            'id',
            'icao_code',
            'name',
            'type',
            'livery',
            'display_name',
            'passenger_capacity',
            'cargo_capacity_kg',
            'range_nm',
            'min_hours',
            'min_rank',
            'image_url',
        ]

    def validate_icao_code(self, value):
        return value.strip().upper()


class RouteSerializer(serializers.ModelSerializer):
    duration_display = serializers.CharField(read_only=True)

    class Meta:
        model = Route
        fields = [
            'id',
            'route_number',
            'dep_icao',
            'arr_icao',
            'aircraft_icao',
            'livery',
            'est_flight_time_minutes',
            'duration_display',
            'route_type',
            'min_rank',
            'notes',
            'is_active',
        ]

    def validate(self, attrs):
        for field in ('dep_icao', 'arr_icao', 'aircraft_icao'):
            if attrs.get(field):
                attrs[field] = attrs[field].strip().upper()
        return attrs


class MultiplierConfigSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)

    class Meta:
        model = MultiplierConfig
        fields = ['id', 'name', 'value', 'label', 'description', 'is_active']
