import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("classes", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ContentItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("type", models.CharField(choices=[("document", "Document"), ("video", "Video"), ("image", "Image"), ("link", "Link"), ("assignment", "Assignment")], max_length=20)),
                ("content", models.TextField(blank=True, default="")),
                ("tags", models.JSONField(blank=True, default=list)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("published", "Published"), ("archived", "Archived")], default="draft", max_length=20)),
                ("publish_date", models.DateTimeField(blank=True, null=True)),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=1)),
                ("previous_versions", models.JSONField(blank=True, default=list)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("author", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="content_items", to=settings.AUTH_USER_MODEL)),
                ("klass", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="content_items", to="classes.class")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="ContentModule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("order", models.IntegerField()),
                ("status", models.CharField(choices=[("draft", "Draft"), ("published", "Published"), ("archived", "Archived")], default="draft", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="content_modules", to=settings.AUTH_USER_MODEL)),
                ("klass", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="content_modules", to="classes.class")),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="ContentModuleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField()),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="module_links", to="content.contentitem")),
                ("module", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="item_links", to="content.contentmodule")),
            ],
            options={
                "ordering": ["position"],
                "constraints": [models.UniqueConstraint(fields=("module", "item"), name="uniq_module_item")],
            },
        ),
        migrations.AddField(
            model_name="contentmodule",
            name="items",
            field=models.ManyToManyField(blank=True, related_name="modules", through="content.ContentModuleItem", to="content.contentitem"),
        ),
    ]
