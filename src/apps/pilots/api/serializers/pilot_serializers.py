# src/apps/pilots/api/serializers/pilot_serializers.py
"""
Pilot Serializers
"""

from rest_framework import serializers

from ...models import (
    Pilot,
    RankConfig,
    PilotStreak,
    UserRole,
    AuthIdentity,
    BonusTier,
    PID_PATTERN,
)
from ...services import RankService


class PilotListSerializer(serializers.ModelSerializer):
    rank_label = serializers.SerializerMethodField()

    class Meta:
        model = Pilot
        fields = [
            'id',
            'pid',
            'full_name',
            'current_rank',
            'rank_label',
            'total_hours',
            'total_pireps',
            'avatar_url',
        ]

    def get_rank_label(self, obj) -> str:
        return RankService.format_rank(obj.current_rank)


class PilotDetailSerializer(serializers.ModelSerializer):
    rank_label = serializers.SerializerMethodField()

    class Meta:
        model = Pilot
        fields = [
            'id',
            'user_id',
            'pid',
            'full_name',
            'discord_user_id',
            'discord_username',
            'total_hours',
            'total_pireps',
            'current_rank',
            'rank_label',
            'vatsim_id',
            'ivao_id',
            'avatar_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'total_hours', 'total_pireps', 'current_rank', 'created_at', 'updated_at']

    def get_rank_label(self, obj) -> str:
        return RankService.format_rank(obj.current_rank)

    def validate_pid(self, value):
        value = value.strip().upper()
        if not PID_PATTERN.match(value):
            raise serializers.ValidationError('Invalid format. Use AFLVXXX (letters/numbers).')
        return value


class PilotProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a pilot may change on their own profile."""

    class Meta:
        model = Pilot
        fields = ['full_name', 'discord_username', 'vatsim_id', 'ivao_id', 'avatar_url']


class PilotStreakSerializer(serializers.ModelSerializer):
    class Meta:
        model = PilotStreak
        fields = ['current_streak', 'longest_streak', 'last_pirep_date']


class RankConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = RankConfig
        fields = [
            'id',
            'name',
            'label',
            'min_hours',
            'max_hours',
            'order_index',
            'color',
            'description',
            'aircraft_unlocks',
            'perk_unlocks',
            'is_active',
        ]

    def validate(self, attrs):
        min_hours = attrs.get('min_hours', getattr(self.instance, 'min_hours', None))
        max_hours = attrs.get('max_hours', getattr(self.instance, 'max_hours', None))
        if max_hours is not None and min_hours is not None and max_hours <= min_hours:
            raise serializers.ValidationError({'max_hours': 'Must be greater than min_hours'})
        return attrs


class UserRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserRole
        fields = ['id', 'user_id', 'role', 'created_at']
        read_only_fields = ['id', 'created_at']


class AuthIdentitySerializer(serializers.ModelSerializer):
    class Meta:
        model = AuthIdentity
        fields = ['id', 'user_id', 'provider', 'provider_id', 'username', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'user_id': {'required': False}}


class BonusTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = BonusTier
        fields = ['id', 'name', 'min_hours', 'sort_order', 'is_active']
