from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from .views import ContentItemViewSet
from .views import ContentModuleViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("content-items", ContentItemViewSet, basename="content-item")
router.register("content-modules", ContentModuleViewSet, basename="content-module")

app_name = "content"
urlpatterns = router.urls
