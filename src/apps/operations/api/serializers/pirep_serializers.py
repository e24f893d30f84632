# src/apps/operations/api/serializers/pirep_serializers.py
"""
PIREP Serializers
"""

from decimal import Decimal

from rest_framework import serializers

from ...models import Pirep, PirepStatus, FlightType


class PirepListSerializer(serializers.ModelSerializer):
    pilot_pid = serializers.CharField(source='pilot.pid', read_only=True)

    class Meta:
        model = Pirep
        fields = [
            'id',
            'pilot',
            'pilot_pid',
            'flight_number',
            'dep_icao',
            'arr_icao',
            'aircraft_icao',
            'flight_hours',
            'multiplier',
            'flight_date',
            'status',
            'created_at',
        ]


class PirepDetailSerializer(serializers.ModelSerializer):
    pilot_pid = serializers.CharField(source='pilot.pid', read_only=True)
    pilot_name = serializers.CharField(source='pilot.full_name', read_only=True)
    credited_hours = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Pirep
        fields = [
            'id',
            'pilot',
            'pilot_pid',
            'pilot_name',
            'flight_number',
            'dep_icao',
            'arr_icao',
            'aircraft_icao',
            'flight_hours',
            'multiplier',
            'credited_hours',
            'flight_date',
            'operator',
            'flight_type',
            'source',
            'status',
            'status_reason',
            'reviewed_at',
            'reviewed_by',
            'created_at',
            'updated_at',
        ]


class PirepCreateSerializer(serializers.Serializer):
    flight_number = serializers.CharField(max_length=20)
    dep_icao = serializers.CharField(max_length=4)
    arr_icao = serializers.CharField(max_length=4)
    aircraft_icao = serializers.CharField(max_length=50)
    flight_hours = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal('0.01'))
    flight_date = serializers.DateField(required=False)
    operator = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    flight_type = serializers.ChoiceField(choices=FlightType.choices, default=FlightType.PASSENGER)
    multiplier = serializers.CharField(required=False, allow_blank=True)


class PirepReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PirepStatus.choices)
    reason = serializers.CharField(required=False, allow_blank=True, default='')
