"""Classes and enrollments API endpoints."""

import logging

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from school_hub.classes import services
from school_hub.classes.models import Class
from school_hub.classes.models import Enrollment
from school_hub.communication.services import discard_class_announcements
from school_hub.policies import ensure_allowed
from school_hub.policies.permissions import PolicyPermission
from school_hub.policies.rules import is_admin

from .filters import ClassFilter
from .serializers import AttendanceEntrySerializer
from .serializers import ClassEnrollmentSerializer
from .serializers import ClassSerializer
from .serializers import EnrollmentCreateSerializer
from .serializers import EnrollmentSerializer
from .serializers import EnrollmentUpdateSerializer
from .serializers import StudentEnrollmentSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Classes"]),
    retrieve=extend_schema(tags=["Classes"]),
    create=extend_schema(tags=["Classes"]),
    update=extend_schema(tags=["Classes"]),
    partial_update=extend_schema(tags=["Classes"]),
    destroy=extend_schema(tags=["Classes"]),
)
class ClassViewSet(viewsets.ModelViewSet):
    queryset = Class.objects.select_related("teacher")
    serializer_class = ClassSerializer
    permission_classes = [PolicyPermission]
    policy_model = Class
    filter_backends = [DjangoFilterBackend]
    filterset_class = ClassFilter

    def perform_create(self, serializer):
        user = self.request.user
        if is_admin(user):
            if "teacher" not in serializer.validated_data:
                raise ValidationError({"teacher_id": "An admin must name the teacher."})
            klass = serializer.save()
        else:
            # Teachers always own what they create
            klass = serializer.save(teacher=user)
        logger.info("Class %s created by user %s", klass.pk, user.pk)

    def perform_update(self, serializer):
        teacher = serializer.validated_data.get("teacher")
        if (
            teacher is not None
            and teacher.pk != serializer.instance.teacher_id
            and not is_admin(self.request.user)
        ):
            msg = "Only an admin can reassign a class."
            raise PermissionDenied(msg)
        serializer.save()

    def perform_destroy(self, instance):
        logger.info(
            "Class %s deleted by user %s with %s enrollments",
            instance.pk,
            self.request.user.pk,
            instance.enrollments.count(),
        )
        discard_class_announcements(instance.pk)
        instance.delete()


@extend_schema(tags=["Enrollments"])
class EnrollmentViewSet(viewsets.GenericViewSet):
    queryset = Enrollment.objects.select_related("klass", "student").prefetch_related(
        "attendance"
    )
    serializer_class = EnrollmentSerializer
    permission_classes = [PolicyPermission]
    policy_model = Enrollment
    policy_actions = {
        "student": None,
        "by_class": None,
        "attendance": "record_attendance",
    }

    @extend_schema(request=EnrollmentCreateSerializer, responses=EnrollmentSerializer)
    def create(self, request, *args, **kwargs):
        serializer = EnrollmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        enrollment = services.enroll(
            request.user, serializer.validated_data["class_id"]
        )
        enrollment = self.get_queryset().get(pk=enrollment.pk)
        return Response(
            EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, *args, **kwargs):
        return Response(EnrollmentSerializer(self.get_object()).data)

    @extend_schema(request=EnrollmentUpdateSerializer, responses=EnrollmentSerializer)
    def update(self, request, *args, **kwargs):
        enrollment = self.get_object()
        serializer = EnrollmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "grade" in data:
            if not (is_admin(request.user) or enrollment.klass.teacher_id == request.user.pk):
                msg = "Only the class teacher or an admin can grade."
                raise PermissionDenied(msg)
            enrollment.grade = data["grade"]
            enrollment.save(update_fields=["grade", "updated_at"])
        if "status" in data:
            services.change_enrollment_status(request.user, enrollment, data["status"])

        enrollment = self.get_queryset().get(pk=enrollment.pk)
        return Response(EnrollmentSerializer(enrollment).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    @extend_schema(responses=StudentEnrollmentSerializer(many=True))
    @action(detail=False)
    def student(self, request):
        enrollments = (
            Enrollment.objects.filter(student=request.user)
            .select_related("klass", "klass__teacher")
            .prefetch_related("attendance")
        )
        serializer = StudentEnrollmentSerializer(enrollments, many=True)
        return Response(serializer.data)

    @extend_schema(responses=ClassEnrollmentSerializer(many=True))
    @action(detail=False, url_path=r"class/(?P<class_id>\d+)")
    def by_class(self, request, class_id=None):
        klass = get_object_or_404(Class, pk=class_id)
        ensure_allowed(
            request.user,
            klass,
            "view_enrollments",
            "Only the teacher of this class or an admin can view enrollments.",
        )
        enrollments = (
            klass.enrollments.select_related("student")
            .prefetch_related("attendance")
            .order_by("id")
        )
        serializer = ClassEnrollmentSerializer(enrollments, many=True)
        return Response(serializer.data)

    @extend_schema(request=AttendanceEntrySerializer, responses=EnrollmentSerializer)
    @action(detail=True, methods=["post"])
    def attendance(self, request, pk=None):
        enrollment = self.get_object()
        serializer = AttendanceEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.record_attendance(
            enrollment,
            recorded_by=request.user,
            **serializer.validated_data,
        )
        enrollment = self.get_queryset().get(pk=enrollment.pk)
        return Response(
            EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED
        )
