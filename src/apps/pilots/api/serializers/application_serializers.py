# src/apps/pilots/api/serializers/application_serializers.py
from rest_framework import serializers

from ...models import PilotApplication, LeaveOfAbsence


class PilotApplicationSerializer(serializers.ModelSerializer):

    class Meta:
        model = PilotApplication
        fields = [
            'id',
            'user_id',
            'email',
            'full_name',
            'discord_username',
            'discord_user_id',
            'experience_level',
            'preferred_simulator',
            'reason_for_joining',
            'if_grade',
            'is_ifatc',
            'ifc_trust_level',
            'age_range',
            'other_va_membership',
            'hear_about_aflv',
            'vatsim_id',
            'ivao_id',
            'status',
            'assigned_pid',
            'rejection_reason',
            'reviewed_at',
            'reviewed_by',
            'created_at',
        ]
        read_only_fields = [
            'id',
            'user_id',
            'status',
            'assigned_pid',
            'rejection_reason',
            'reviewed_at',
            'reviewed_by',
            'created_at',
        ]


class ApplicationApproveSerializer(serializers.Serializer):
    pid = serializers.CharField(max_length=7)


class ApplicationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class LeaveOfAbsenceSerializer(serializers.ModelSerializer):
    pilot_pid = serializers.CharField(source='pilot.pid', read_only=True)

    class Meta:
        model = LeaveOfAbsence
        fields = [
            'id',
            'pilot',
            'pilot_pid',
            'start_date',
            'end_date',
            'reason',
            'status',
            'reviewed_by',
            'reviewed_at',
            'created_at',
        ]
        read_only_fields = ['id', 'pilot', 'status', 'reviewed_by', 'reviewed_at', 'created_at']

    def validate(self, attrs):
        if attrs['end_date'] < attrs['start_date']:
            raise serializers.ValidationError({'end_date': 'End date must be on or after the start date'})
        return attrs
