from django.urls import path
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework_simplejwt.views import TokenVerifyView

from .auth_views import LoginView
from .auth_views import RegisterView


# Annotated JWT view for proper schema tag grouping
@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class JWTVerifyView(TokenVerifyView):
    pass


app_name = "auth"
urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("jwt/verify/", JWTVerifyView.as_view(), name="jwt-verify"),
]
