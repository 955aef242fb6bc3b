import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Class",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("subject", models.CharField(db_index=True, max_length=120)),
                ("grade_level", models.CharField(max_length=50)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("schedule", models.JSONField(blank=True, default=list)),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("enrollment_count", models.PositiveIntegerField(default=0)),
                ("status", models.CharField(choices=[("active", "Active"), ("upcoming", "Upcoming"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="upcoming", max_length=20)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("teacher", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="taught_classes", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "classes",
                "ordering": ["start_date", "id"],
            },
        ),
        migrations.CreateModel(
            name="Enrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("enrollment_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("status", models.CharField(choices=[("active", "Active"), ("dropped", "Dropped"), ("completed", "Completed")], default="active", max_length=20)),
                ("grade", models.CharField(blank=True, default="", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("klass", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enrollments", to="classes.class")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enrollments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-enrollment_date", "-id"],
                "constraints": [models.UniqueConstraint(fields=("klass", "student"), name="uniq_enrollment_class_student")],
            },
        ),
        migrations.CreateModel(
            name="AttendanceEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("status", models.CharField(choices=[("present", "Present"), ("absent", "Absent"), ("late", "Late"), ("excused", "Excused")], max_length=20)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("enrollment", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance", to="classes.enrollment")),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "attendance entries",
                "ordering": ["date", "id"],
            },
        ),
    ]
