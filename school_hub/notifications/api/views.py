from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from school_hub.notifications.models import Notification
from school_hub.policies.permissions import PolicyPermission

from .serializers import NotificationSerializer


@extend_schema(tags=["Notifications"])
class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    GenericViewSet,
):
    """Notifications for the authenticated user.

    - list: request.user's notifications, newest first
    - destroy: deletes a notification (recipient only)
    - read / read_all
    """

    permission_classes = [PolicyPermission]
    policy_model = Notification
    policy_actions = {"read": "update", "read_all": None}
    serializer_class = NotificationSerializer

    def get_queryset(self):
        # Scoped to the caller, so other users' ids are a 404
        return Notification.objects.filter(recipient=self.request.user)

    @action(detail=True, methods=["put", "post"])
    def read(self, request, pk=None):
        notification = self.get_object()
        notification.mark_read()
        serializer = self.get_serializer(notification)
        return Response(serializer.data)

    @action(detail=False, methods=["put", "post"], url_path="read-all")
    def read_all(self, request):
        updated = (
            self.get_queryset()
            .filter(is_read=False)
            .update(is_read=True, read_at=timezone.now())
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)
