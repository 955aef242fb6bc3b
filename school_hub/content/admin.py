from django.contrib import admin

from school_hub.content import models


class ContentModuleItemInline(admin.TabularInline):
    model = models.ContentModuleItem
    extra = 0
    raw_id_fields = ["item"]


@admin.register(models.ContentItem)
class ContentItemAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "type", "klass", "author", "status", "version"]
    list_filter = ["type", "status"]
    search_fields = ["title", "description"]
    readonly_fields = ["version", "previous_versions"]


@admin.register(models.ContentModule)
class ContentModuleAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "klass", "order", "status"]
    list_filter = ["status"]
    inlines = [ContentModuleItemInline]
