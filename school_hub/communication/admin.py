from django.contrib import admin

from school_hub.communication import models


@admin.register(models.Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "recipient", "subject", "is_read", "created_at"]
    search_fields = ["subject", "content"]
    list_filter = ["is_read", "created_at"]


@admin.register(models.Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "author", "audience_type", "priority", "start_date", "end_date"]
    search_fields = ["title", "content"]
    list_filter = ["audience_type", "priority"]
