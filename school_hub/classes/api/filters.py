import django_filters

from school_hub.classes.models import Class


def split_tags(value: str) -> set[str]:
    return {tag.strip() for tag in value.split(",") if tag.strip()}


def filter_any_tag(queryset, name, value):
    """Keep rows whose JSON ``tags`` list shares at least one comma-separated tag.

    Done on ids in Python so it works on every database backend.
    """

    wanted = split_tags(value)
    if not wanted:
        return queryset
    ids = [
        pk
        for pk, tags in queryset.values_list("pk", name)
        if wanted.intersection(tags or [])
    ]
    return queryset.filter(pk__in=ids)


class ClassFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status")
    subject = django_filters.CharFilter(field_name="subject", lookup_expr="iexact")
    grade_level = django_filters.CharFilter(field_name="grade_level")
    teacher = django_filters.NumberFilter(field_name="teacher_id")
    tags = django_filters.CharFilter(field_name="tags", method=filter_any_tag)

    class Meta:
        model = Class
        fields = ["status", "subject", "grade_level", "teacher", "tags"]
