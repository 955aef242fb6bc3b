from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from school_hub.notifications.api.views import NotificationViewSet

from .views import AnnouncementViewSet
from .views import MessageViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("messages", MessageViewSet)
router.register("announcements", AnnouncementViewSet, basename="announcement")
router.register("notifications", NotificationViewSet, basename="notifications")

app_name = "communications"
urlpatterns = router.urls
