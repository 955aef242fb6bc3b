import pytest

from school_hub.content import services
from school_hub.content.models import ContentItem
from school_hub.content.models import ContentModule
from tests.factories import create_class
from tests.factories import create_content_item
from tests.factories import create_user


@pytest.mark.django_db
class TestContentVersioning:
    def setup_method(self):
        self.teacher = create_user("teach", role="teacher")
        self.klass = create_class(self.teacher)
        self.item = create_content_item(self.klass, self.teacher, content="v1")

    def test_content_change_appends_exactly_one_version(self):
        services.update_content_item(self.item, {"content": "v2"}, self.teacher)

        self.item.refresh_from_db()
        assert self.item.version == 2
        assert self.item.content == "v2"
        assert len(self.item.previous_versions) == 1
        assert self.item.previous_versions[0]["content"] == "v1"
        assert self.item.previous_versions[0]["updated_by"] == self.teacher.pk

    def test_two_edits_keep_history_in_order(self):
        services.update_content_item(self.item, {"content": "v2"}, self.teacher)
        services.update_content_item(self.item, {"content": "v3"}, self.teacher)

        self.item.refresh_from_db()
        assert self.item.version == 3
        assert [v["content"] for v in self.item.previous_versions] == ["v1", "v2"]

    def test_stale_copy_still_records_intermediate_version(self):
        stale = ContentItem.objects.get(pk=self.item.pk)
        services.update_content_item(self.item, {"content": "v2"}, self.teacher)

        saved = services.update_content_item(stale, {"content": "v3"}, self.teacher)

        assert saved.version == 3
        self.item.refresh_from_db()
        assert self.item.version == 3
        assert self.item.content == "v3"
        assert [v["content"] for v in self.item.previous_versions] == ["v1", "v2"]

    def test_other_fields_do_not_create_versions(self):
        services.update_content_item(self.item, {"title": "Renamed"}, self.teacher)
        services.update_content_item(self.item, {"content": "v1"}, self.teacher)

        self.item.refresh_from_db()
        assert self.item.title == "Renamed"
        assert self.item.version == 1
        assert self.item.previous_versions == []


@pytest.mark.django_db
class TestModuleItems:
    def test_order_is_kept_and_duplicates_dropped(self):
        teacher = create_user("teach", role="teacher")
        klass = create_class(teacher)
        first = create_content_item(klass, teacher, title="First")
        second = create_content_item(klass, teacher, title="Second")
        module = ContentModule.objects.create(
            title="Week 1", description="", klass=klass, order=1, created_by=teacher
        )

        services.set_module_items(module, [second.pk, first.pk, second.pk])
        assert module.ordered_items() == [second, first]

        services.set_module_items(module, [first.pk])
        assert module.ordered_items() == [first]
        assert ContentItem.objects.count() == 2
