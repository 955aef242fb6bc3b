import django_filters

from school_hub.classes.api.filters import filter_any_tag
from school_hub.content.models import ContentItem
from school_hub.content.models import ContentModule


class ContentItemFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status")
    type = django_filters.CharFilter(field_name="type")
    tags = django_filters.CharFilter(field_name="tags", method=filter_any_tag)

    class Meta:
        model = ContentItem
        fields = ["status", "type", "tags"]


class ContentModuleFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status")

    class Meta:
        model = ContentModule
        fields = ["status"]
