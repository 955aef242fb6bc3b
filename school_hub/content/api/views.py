"""Content items and modules API endpoints."""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from school_hub.content.models import ContentItem
from school_hub.content.models import ContentModule
from school_hub.content.models import PublishStatus
from school_hub.policies.permissions import PolicyPermission
from school_hub.policies.rules import is_student

from .filters import ContentItemFilter
from .filters import ContentModuleFilter
from .serializers import ContentItemSerializer
from .serializers import ContentModuleSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Content Items"]),
    retrieve=extend_schema(tags=["Content Items"]),
    create=extend_schema(tags=["Content Items"]),
    update=extend_schema(tags=["Content Items"]),
    partial_update=extend_schema(tags=["Content Items"]),
    destroy=extend_schema(tags=["Content Items"]),
)
class ContentItemViewSet(viewsets.ModelViewSet):
    serializer_class = ContentItemSerializer
    permission_classes = [PolicyPermission]
    policy_model = ContentItem
    policy_actions = {"by_class": "list"}
    filter_backends = [DjangoFilterBackend]
    filterset_class = ContentItemFilter

    def get_queryset(self):
        queryset = ContentItem.objects.all()
        # Detail lookups stay unscoped so hidden items answer 403, not 404
        if self.action in ("list", "by_class") and is_student(self.request.user):
            queryset = queryset.visible_to_students()
        return queryset

    def perform_create(self, serializer):
        item = serializer.save(author=self.request.user)
        logger.info("Content item %s created by user %s", item.pk, item.author_id)

    def perform_destroy(self, instance):
        # Module links cascade, the modules themselves stay
        logger.info(
            "Content item %s deleted by user %s", instance.pk, self.request.user.pk
        )
        instance.delete()

    @extend_schema(tags=["Content Items"])
    @action(detail=False, url_path=r"class/(?P<class_id>\d+)")
    def by_class(self, request, class_id=None):
        queryset = self.filter_queryset(self.get_queryset().filter(klass_id=class_id))
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)


@extend_schema_view(
    list=extend_schema(tags=["Content Modules"]),
    retrieve=extend_schema(tags=["Content Modules"]),
    create=extend_schema(tags=["Content Modules"]),
    update=extend_schema(tags=["Content Modules"]),
    partial_update=extend_schema(tags=["Content Modules"]),
    destroy=extend_schema(tags=["Content Modules"]),
)
class ContentModuleViewSet(viewsets.ModelViewSet):
    serializer_class = ContentModuleSerializer
    permission_classes = [PolicyPermission]
    policy_model = ContentModule
    policy_actions = {"by_class": "list"}
    filter_backends = [DjangoFilterBackend]
    filterset_class = ContentModuleFilter

    def get_queryset(self):
        queryset = ContentModule.objects.all()
        if self.action in ("list", "by_class") and is_student(self.request.user):
            queryset = queryset.filter(status=PublishStatus.PUBLISHED)
        return queryset

    def perform_create(self, serializer):
        module = serializer.save(created_by=self.request.user)
        logger.info("Content module %s created by user %s", module.pk, module.created_by_id)

    @extend_schema(tags=["Content Modules"])
    @action(detail=False, url_path=r"class/(?P<class_id>\d+)")
    def by_class(self, request, class_id=None):
        queryset = self.filter_queryset(
            self.get_queryset().filter(klass_id=class_id)
        ).order_by("order", "id")
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
