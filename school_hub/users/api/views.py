import logging

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.mixins import UpdateModelMixin
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from school_hub.policies.permissions import PolicyPermission
from school_hub.users.models import User

from .serializers import ChangePasswordSerializer
from .serializers import InvalidCredentials
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Users"]),
    retrieve=extend_schema(tags=["Users"]),
    partial_update=extend_schema(tags=["Users"]),
    update=extend_schema(tags=["Users"]),
)
class UserViewSet(RetrieveModelMixin, ListModelMixin, UpdateModelMixin, GenericViewSet):
    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("id")
    permission_classes = [PolicyPermission]
    policy_model = User
    policy_actions = {"change_password": "change_password"}

    def get_queryset(self, *args, **kwargs):  # type: ignore[override]
        queryset = super().get_queryset()
        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)
        status_ = self.request.query_params.get("status")
        if status_:
            queryset = queryset.filter(status=status_)
        return queryset

    @extend_schema(tags=["Users"])
    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data=serializer.data)

    @extend_schema(tags=["Users"], request=ChangePasswordSerializer, responses=None)
    @action(detail=True, methods=["post"], url_path="change-password")
    def change_password(self, request, pk=None):
        user = self.get_object()
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if not user.check_password(serializer.validated_data["current_password"]):
            msg = "Current password is incorrect"
            raise InvalidCredentials(msg)
        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password", "updated_at"])
        logger.info("Password changed for user %s", user.pk)
        return Response({"message": "Password updated successfully"})
