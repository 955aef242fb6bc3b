from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class PublishStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")
    PUBLISHED = "published", _("Published")
    ARCHIVED = "archived", _("Archived")


class ContentItemQuerySet(models.QuerySet):
    def visible_to_students(self):
        """Published items whose publish date is unset or already past."""
        return self.filter(status=PublishStatus.PUBLISHED).filter(
            models.Q(publish_date__isnull=True)
            | models.Q(publish_date__lte=timezone.now())
        )


class ContentItem(models.Model):
    class Type(models.TextChoices):
        DOCUMENT = "document", _("Document")
        VIDEO = "video", _("Video")
        IMAGE = "image", _("Image")
        LINK = "link", _("Link")
        ASSIGNMENT = "assignment", _("Assignment")

    # Types whose body lives in ``content`` (markup or URL)
    TYPES_REQUIRING_CONTENT = (Type.DOCUMENT, Type.LINK)

    title = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=Type.choices)
    content = models.TextField(blank=True, default="")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="content_items",
    )
    klass = models.ForeignKey(
        "classes.Class", on_delete=models.CASCADE, related_name="content_items"
    )
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT
    )
    publish_date = models.DateTimeField(null=True, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)
    # [{"content": str, "updated_at": iso datetime, "updated_by": user id}]
    previous_versions = models.JSONField(default=list, blank=True)
    # duration (videos), page_count (documents), dimensions (images)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ContentItemQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title


class ContentModule(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField()
    klass = models.ForeignKey(
        "classes.Class", on_delete=models.CASCADE, related_name="content_modules"
    )
    items = models.ManyToManyField(
        ContentItem,
        through="ContentModuleItem",
        related_name="modules",
        blank=True,
    )
    order = models.IntegerField()
    status = models.CharField(
        max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="content_modules",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self):
        return self.title

    def ordered_items(self) -> list[ContentItem]:
        links = self.item_links.select_related("item").order_by("position")
        return [link.item for link in links]


class ContentModuleItem(models.Model):
    module = models.ForeignKey(
        ContentModule, on_delete=models.CASCADE, related_name="item_links"
    )
    item = models.ForeignKey(
        ContentItem, on_delete=models.CASCADE, related_name="module_links"
    )
    position = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["module", "item"], name="uniq_module_item"
            ),
        ]
