from django.contrib import admin

from school_hub.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "recipient", "title", "notification_type", "is_read"]
    search_fields = ["title", "message"]
    list_filter = ["notification_type", "related_type", "is_read", "created_at"]
