"""Gateway: every service mounted under ``/api/<service>/``.

Bearer token checks come from the DRF defaults in ``REST_FRAMEWORK``; only
registration, login and token verification opt out.
"""

from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("auth/", include("school_hub.users.api.auth_urls")),
    path("users/", include("school_hub.users.api.urls")),
    path("classes/", include("school_hub.classes.api.urls")),
    path("content/", include("school_hub.content.api.urls")),
    path("communications/", include("school_hub.communication.api.urls")),
]
