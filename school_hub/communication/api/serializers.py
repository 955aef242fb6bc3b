from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from school_hub.classes.models import Class
from school_hub.communication.models import Announcement
from school_hub.communication.models import Message
from school_hub.users.models import User


class MessageSerializer(serializers.ModelSerializer):
    sender_id = serializers.IntegerField(read_only=True)
    recipient_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Message
        fields = (
            "id",
            "sender_id",
            "recipient_id",
            "subject",
            "content",
            "is_read",
            "read_at",
            "created_at",
        )
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    recipient_id = serializers.IntegerField()
    subject = serializers.CharField(max_length=255)
    content = serializers.CharField()


class AnnouncementSerializer(serializers.ModelSerializer):
    author_id = serializers.IntegerField(read_only=True)
    audience_class_id = serializers.PrimaryKeyRelatedField(
        source="audience_class",
        queryset=Class.objects.all(),
        required=False,
        allow_null=True,
    )
    audience_role = serializers.ChoiceField(
        choices=User.Role.choices, required=False, allow_blank=True
    )

    class Meta:
        model = Announcement
        fields = (
            "id",
            "title",
            "content",
            "author_id",
            "audience_type",
            "audience_class_id",
            "audience_role",
            "priority",
            "start_date",
            "end_date",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at")

    def validate(self, attrs):
        def current(field, default=None):
            return attrs.get(field, getattr(self.instance, field, default))

        audience_type = current("audience_type")
        if audience_type == Announcement.AudienceType.CLASS:
            if current("audience_class") is None:
                msg = _("A class audience needs audience_class_id.")
                raise serializers.ValidationError({"audience_class_id": msg})
            attrs["audience_role"] = ""
        elif audience_type == Announcement.AudienceType.ROLE:
            if not current("audience_role"):
                msg = _("A role audience needs audience_role.")
                raise serializers.ValidationError({"audience_role": msg})
            attrs["audience_class"] = None
        elif "audience_type" in attrs:
            attrs["audience_class"] = None
            attrs["audience_role"] = ""

        start_date = current("start_date")
        end_date = current("end_date")
        if start_date and end_date and end_date < start_date:
            msg = _("End date cannot be before the start date.")
            raise serializers.ValidationError({"end_date": msg})
        return attrs
