from rest_framework import serializers

from school_hub.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Read serializer for notifications."""

    unread = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = (
            "id",
            "recipient",
            "title",
            "message",
            "notification_type",
            "related_type",
            "related_id",
            "is_read",
            "unread",
            "read_at",
            "created_at",
        )
        read_only_fields = fields

    def get_unread(self, obj: Notification) -> bool:
        return not bool(obj.is_read)
