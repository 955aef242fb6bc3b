from django.conf import settings
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from .views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)

app_name = "users"
urlpatterns = [
    # Short form of users/me/
    path("me/", UserViewSet.as_view({"get": "me"}), name="me"),
    *router.urls,
]
