from django.contrib import admin

from school_hub.classes import models


class EnrollmentInline(admin.TabularInline):
    model = models.Enrollment
    extra = 0
    fields = ["student", "status", "grade", "enrollment_date"]
    raw_id_fields = ["student"]


@admin.register(models.Class)
class ClassAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "subject", "teacher", "status", "enrollment_count", "capacity"]
    list_filter = ["status", "subject", "grade_level"]
    search_fields = ["name", "subject", "description"]
    readonly_fields = ["enrollment_count"]
    inlines = [EnrollmentInline]


@admin.register(models.AttendanceEntry)
class AttendanceEntryAdmin(admin.ModelAdmin):
    list_display = ["id", "enrollment", "date", "status"]
    list_filter = ["status", "date"]
