# src/apps/discord/api/serializers.py
from rest_framework import serializers


class PracticalStatusActionSerializer(serializers.Serializer):
    """Body of the authenticated ``handle_practical_status`` action."""

    action = serializers.CharField()
    practicalId = serializers.UUIDField()
    status = serializers.ChoiceField(choices=['passed', 'failed'])
    remarks = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)
    guildId = serializers.CharField(required=False, allow_blank=True, default='')


class WebhookNotifySerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=['new_pirep', 'featured_route', 'new_challenge', 'rank_promotion'],
        default='rank_promotion',
    )
    payload = serializers.DictField(required=False, default=dict)
