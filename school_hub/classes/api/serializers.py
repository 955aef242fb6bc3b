from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from school_hub.classes.models import AttendanceEntry
from school_hub.classes.models import Class
from school_hub.classes.models import Enrollment
from school_hub.users.api.serializers import UserSummarySerializer
from school_hub.users.models import User

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class ScheduleSlotSerializer(serializers.Serializer):
    day_of_week = serializers.IntegerField(min_value=0, max_value=6)
    start_time = serializers.RegexField(TIME_PATTERN)
    end_time = serializers.RegexField(TIME_PATTERN)
    location = serializers.CharField()


class ClassSerializer(serializers.ModelSerializer):
    teacher_details = UserSummarySerializer(source="teacher", read_only=True)
    teacher_id = serializers.PrimaryKeyRelatedField(
        source="teacher",
        queryset=User.objects.filter(role=User.Role.TEACHER),
        required=False,
    )
    schedule = serializers.ListField(child=ScheduleSlotSerializer(), required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)
    capacity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Class
        fields = (
            "id",
            "name",
            "description",
            "subject",
            "grade_level",
            "teacher_id",
            "teacher_details",
            "start_date",
            "end_date",
            "schedule",
            "capacity",
            "enrollment_count",
            "status",
            "tags",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("enrollment_count", "created_at", "updated_at")

    def validate(self, attrs):
        start_date = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end_date = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date <= start_date:
            msg = _("End date must be after the start date.")
            raise serializers.ValidationError({"end_date": msg})

        capacity = attrs.get("capacity")
        if self.instance is not None and capacity is not None:
            if capacity < self.instance.enrollment_count:
                msg = _("Capacity cannot be lower than the current enrollment count.")
                raise serializers.ValidationError({"capacity": msg})

        if "schedule" in attrs:
            attrs["schedule"] = [dict(slot) for slot in attrs["schedule"]]
        return attrs


class AttendanceEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = AttendanceEntry
        fields = ("id", "date", "status", "notes", "recorded_by", "created_at")
        read_only_fields = ("recorded_by", "created_at")


class EnrollmentSerializer(serializers.ModelSerializer):
    class_id = serializers.IntegerField(source="klass_id", read_only=True)
    student_id = serializers.IntegerField(read_only=True)
    attendance = AttendanceEntrySerializer(many=True, read_only=True)

    class Meta:
        model = Enrollment
        fields = (
            "id",
            "class_id",
            "student_id",
            "enrollment_date",
            "status",
            "grade",
            "attendance",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class EnrollmentCreateSerializer(serializers.Serializer):
    class_id = serializers.IntegerField()


class EnrollmentUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Enrollment.Status.choices, required=False)
    grade = serializers.CharField(max_length=20, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            msg = _("Provide a status or a grade.")
            raise serializers.ValidationError(msg)
        return attrs


class StudentEnrollmentSerializer(serializers.Serializer):
    """An enrollment with the class it belongs to."""

    enrollment = EnrollmentSerializer(source="*")

    def get_fields(self):
        fields = super().get_fields()
        # "class" is a keyword, so it cannot be a declared attribute
        fields["class"] = ClassSerializer(source="klass")
        return fields


class ClassEnrollmentSerializer(serializers.Serializer):
    """An enrollment with the student's details."""

    enrollment = EnrollmentSerializer(source="*")
    student = UserSummarySerializer()
