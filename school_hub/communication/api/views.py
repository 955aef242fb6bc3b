"""Messages and announcements API endpoints."""

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from school_hub.communication import services
from school_hub.communication.models import Announcement
from school_hub.communication.models import Message
from school_hub.policies import ensure_allowed
from school_hub.policies.permissions import PolicyPermission
from school_hub.policies.rules import is_admin

from .serializers import AnnouncementSerializer
from .serializers import MessageCreateSerializer
from .serializers import MessageSerializer


@extend_schema(tags=["Messages"])
class MessageViewSet(
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Message.objects.all()
    serializer_class = MessageSerializer
    permission_classes = [PolicyPermission]
    policy_model = Message
    policy_actions = {"inbox": "list", "outbox": "list"}

    @extend_schema(request=MessageCreateSerializer, responses=MessageSerializer)
    def create(self, request, *args, **kwargs):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message, _notification = services.send_message(
            request.user, **serializer.validated_data
        )
        return Response(
            MessageSerializer(message).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, *args, **kwargs):
        message = self.get_object()
        if message.recipient_id == request.user.pk:
            message.mark_read()
        return Response(self.get_serializer(message).data)

    @action(detail=False)
    def inbox(self, request):
        messages = Message.objects.filter(recipient=request.user)
        return Response(self.get_serializer(messages, many=True).data)

    @action(detail=False)
    def outbox(self, request):
        messages = Message.objects.filter(sender=request.user)
        return Response(self.get_serializer(messages, many=True).data)


@extend_schema_view(
    list=extend_schema(tags=["Announcements"]),
    retrieve=extend_schema(tags=["Announcements"]),
    create=extend_schema(tags=["Announcements"]),
    update=extend_schema(tags=["Announcements"]),
    partial_update=extend_schema(tags=["Announcements"]),
    destroy=extend_schema(tags=["Announcements"]),
)
class AnnouncementViewSet(viewsets.ModelViewSet):
    serializer_class = AnnouncementSerializer
    permission_classes = [PolicyPermission]
    policy_model = Announcement

    def get_queryset(self):
        queryset = Announcement.objects.select_related("audience_class")
        if self.action != "list":
            return queryset
        queryset = queryset.active()
        if not is_admin(self.request.user):
            queryset = queryset.addressed_to(self.request.user)
        return queryset.by_priority()

    def _check_class_audience(self, serializer):
        klass = serializer.validated_data.get("audience_class")
        if klass is not None:
            ensure_allowed(
                self.request.user,
                klass,
                "announce",
                "Teachers can only announce to classes they teach.",
            )

    def perform_create(self, serializer):
        self._check_class_audience(serializer)
        serializer.instance = services.create_announcement(
            self.request.user, serializer.validated_data
        )

    def perform_update(self, serializer):
        self._check_class_audience(serializer)
        serializer.instance = services.update_announcement(
            serializer.instance, serializer.validated_data
        )

    def perform_destroy(self, instance):
        services.delete_announcement(instance)
