from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _

from school_hub.users.models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin):
    fieldsets = (
        *auth_admin.UserAdmin.fieldsets,
        (
            _("School"),
            {"fields": ("role", "status", "avatar", "preferences", "contact_info")},
        ),
    )
    list_display = ["username", "email", "role", "status", "is_superuser"]
    list_filter = ["role", "status", "is_superuser"]
    search_fields = ["username", "email", "first_name", "last_name"]
