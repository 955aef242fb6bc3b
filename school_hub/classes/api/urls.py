from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from .views import ClassViewSet
from .views import EnrollmentViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("classes", ClassViewSet)
router.register("enrollments", EnrollmentViewSet)

app_name = "classes"
urlpatterns = router.urls
