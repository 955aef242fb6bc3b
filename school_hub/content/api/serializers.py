from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from school_hub.classes.models import Class
from school_hub.content import services
from school_hub.content.models import ContentItem
from school_hub.content.models import ContentModule
from school_hub.policies.rules import content_item_visible_to_students
from school_hub.policies.rules import is_student

METADATA_FIELDS = ("duration", "page_count", "dimensions")


class ContentItemSerializer(serializers.ModelSerializer):
    class_id = serializers.PrimaryKeyRelatedField(
        source="klass", queryset=Class.objects.all()
    )
    author_id = serializers.IntegerField(read_only=True)
    tags = serializers.ListField(child=serializers.CharField(), required=False)
    metadata = serializers.JSONField(required=False)

    class Meta:
        model = ContentItem
        fields = (
            "id",
            "title",
            "description",
            "type",
            "content",
            "author_id",
            "class_id",
            "tags",
            "status",
            "publish_date",
            "due_date",
            "version",
            "previous_versions",
            "metadata",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("version", "previous_versions", "created_at", "updated_at")

    def validate(self, attrs):
        item_type = attrs.get("type", getattr(self.instance, "type", None))
        content = attrs.get("content", getattr(self.instance, "content", ""))
        if item_type in ContentItem.TYPES_REQUIRING_CONTENT and not content:
            msg = _("Content is required for documents and links.")
            raise serializers.ValidationError({"content": msg})
        return attrs

    def validate_metadata(self, value):
        if not isinstance(value, dict):
            msg = _("Metadata must be an object.")
            raise serializers.ValidationError(msg)
        unknown = sorted(set(value) - set(METADATA_FIELDS))
        if unknown:
            msg = f"Unknown metadata fields: {', '.join(unknown)}"
            raise serializers.ValidationError(msg)
        return value

    def update(self, instance, validated_data):
        request = self.context["request"]
        return services.update_content_item(instance, validated_data, request.user)


class ContentModuleSerializer(serializers.ModelSerializer):
    class_id = serializers.PrimaryKeyRelatedField(
        source="klass", queryset=Class.objects.all()
    )
    created_by_id = serializers.IntegerField(read_only=True)
    content_items = serializers.ListField(
        child=serializers.IntegerField(), write_only=True, required=False
    )
    items = serializers.SerializerMethodField()

    class Meta:
        model = ContentModule
        fields = (
            "id",
            "title",
            "description",
            "class_id",
            "content_items",
            "items",
            "order",
            "status",
            "created_by_id",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at")

    def validate_content_items(self, value):
        known = set(
            ContentItem.objects.filter(pk__in=value).values_list("pk", flat=True)
        )
        missing = [pk for pk in value if pk not in known]
        if missing:
            msg = f"Unknown content items: {', '.join(map(str, missing))}"
            raise serializers.ValidationError(msg)
        return value

    def get_items(self, obj) -> list[dict]:
        items = obj.ordered_items()
        request = self.context.get("request")
        if request is not None and is_student(request.user):
            items = [item for item in items if content_item_visible_to_students(item)]
        return ContentItemSerializer(items, many=True).data

    def create(self, validated_data):
        item_ids = validated_data.pop("content_items", [])
        module = super().create(validated_data)
        services.set_module_items(module, item_ids)
        return module

    def update(self, instance, validated_data):
        item_ids = validated_data.pop("content_items", None)
        module = super().update(instance, validated_data)
        if item_ids is not None:
            services.set_module_items(module, item_ids)
        return module
