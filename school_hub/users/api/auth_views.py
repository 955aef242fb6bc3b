import logging

from django.contrib.auth.models import update_last_login
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from school_hub.users.tokens import issue_access_token

from .serializers import LoginSerializer
from .serializers import RegisterSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _token_response(user, request, status_code=status.HTTP_200_OK) -> Response:
    data = {
        "token": issue_access_token(user),
        "user": UserSerializer(user, context={"request": request}).data,
    }
    return Response(data, status=status_code)


class RegisterView(APIView):
    """Create an account and hand back a bearer token for it."""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(tags=["Authentication"], request=RegisterSerializer)
    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s with role %s", user.pk, user.role)
        return _token_response(user, request, status.HTTP_201_CREATED)


class LoginView(APIView):
    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(tags=["Authentication"], request=LoginSerializer)
    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        update_last_login(None, user)
        return _token_response(user, request)
