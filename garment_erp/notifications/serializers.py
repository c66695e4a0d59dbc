from rest_framework import serializers

from garment_erp.core.models import User, Role
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'user', 'title', 'message', 'type', 'is_read', 'link', 'created_at']
        read_only_fields = ['id', 'is_read', 'created_at']
        extra_kwargs = {
            'title': {'allow_blank': False},
            'message': {'allow_blank': False},
        }


class BroadcastSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=Notification.Type.choices, default=Notification.Type.INFO)
    link = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    roles = serializers.ListField(child=serializers.ChoiceField(choices=Role.choices), required=False)

    def save(self):
        data = dict(self.validated_data)
        roles = data.pop('roles', None)
        recipients = User.objects.filter(is_active=True)
        if roles:
            recipients = recipients.filter(role__in=roles)
        notifications = Notification.objects.bulk_create(
            [Notification(user=user, **data) for user in recipients.only('id')]
        )
        return notifications
