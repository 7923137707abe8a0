from rest_framework import serializers

from portal.models import DeviceSubscription


class SubscribeDeviceSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=512)
    platform = serializers.ChoiceField(choices=[c for c, _ in DeviceSubscription.PLATFORM_CHOICES])


class UnsubscribeDeviceSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=512)


class NotificationListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=20)
