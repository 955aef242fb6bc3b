import pytest
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from school_hub.classes import services
from school_hub.classes.models import Enrollment
from tests.factories import create_class
from tests.factories import create_user
from tests.factories import enroll


@pytest.mark.django_db
class TestEnroll:
    def setup_method(self):
        self.teacher = create_user("teach", role="teacher")
        self.student = create_user("stud", role="student")
        self.klass = create_class(self.teacher, capacity=2)

    def test_enroll_creates_active_enrollment_and_counts_it(self):
        enrollment = services.enroll(self.student, self.klass.pk)

        self.klass.refresh_from_db()
        assert enrollment.status == Enrollment.Status.ACTIVE
        assert self.klass.enrollment_count == 1

    def test_unknown_class(self):
        with pytest.raises(NotFound):
            services.enroll(self.student, 999_999)

    def test_class_full(self):
        enroll(self.klass, create_user("s1"))
        enroll(self.klass, create_user("s2"))

        with pytest.raises(ValidationError) as exc:
            services.enroll(self.student, self.klass.pk)
        assert services.CLASS_FULL in str(exc.value.detail)

        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 2
        assert not Enrollment.objects.filter(student=self.student).exists()

    def test_already_enrolled(self):
        services.enroll(self.student, self.klass.pk)
        with pytest.raises(ValidationError) as exc:
            services.enroll(self.student, self.klass.pk)
        assert services.ALREADY_ENROLLED in str(exc.value.detail)
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 1

    def test_completed_enrollment_cannot_reenroll(self):
        enroll(self.klass, self.student, status=Enrollment.Status.COMPLETED)
        with pytest.raises(ValidationError):
            services.enroll(self.student, self.klass.pk)

    def test_reenroll_after_drop_reactivates_the_same_row(self):
        first = services.enroll(self.student, self.klass.pk)
        services.change_enrollment_status(
            self.student, first, Enrollment.Status.DROPPED
        )

        again = services.enroll(self.student, self.klass.pk)

        self.klass.refresh_from_db()
        assert again.pk == first.pk
        assert again.status == Enrollment.Status.ACTIVE
        assert self.klass.enrollment_count == 1


@pytest.mark.django_db
class TestChangeEnrollmentStatus:
    def setup_method(self):
        self.teacher = create_user("teach", role="teacher")
        self.student = create_user("stud", role="student")
        self.klass = create_class(self.teacher, capacity=1)
        self.enrollment = enroll(self.klass, self.student)

    def test_drop_frees_the_seat(self):
        services.change_enrollment_status(
            self.student, self.enrollment, Enrollment.Status.DROPPED
        )
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 0

    def test_counter_never_goes_negative(self):
        # Counter out of step with the rows, e.g. after a manual fix-up
        self.klass.enrollment_count = 0
        self.klass.save(update_fields=["enrollment_count"])

        services.change_enrollment_status(
            self.teacher, self.enrollment, Enrollment.Status.DROPPED
        )
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 0

    def test_same_status_is_a_no_op(self):
        services.change_enrollment_status(
            self.teacher, self.enrollment, Enrollment.Status.ACTIVE
        )
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 1

    def test_student_may_only_drop(self):
        with pytest.raises(PermissionDenied):
            services.change_enrollment_status(
                self.student, self.enrollment, Enrollment.Status.COMPLETED
            )

    def test_completing_leaves_active(self):
        services.change_enrollment_status(
            self.teacher, self.enrollment, Enrollment.Status.COMPLETED
        )
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 0

    def test_reactivation_checks_capacity(self):
        services.change_enrollment_status(
            self.teacher, self.enrollment, Enrollment.Status.DROPPED
        )
        enroll(self.klass, create_user("newcomer"))

        with pytest.raises(ValidationError):
            services.change_enrollment_status(
                self.teacher, self.enrollment, Enrollment.Status.ACTIVE
            )
        self.enrollment.refresh_from_db()
        assert self.enrollment.status == Enrollment.Status.DROPPED


@pytest.mark.django_db
class TestClassRoster:
    def test_teacher_first_then_active_students(self):
        teacher = create_user("teach", role="teacher")
        klass = create_class(teacher)
        active = create_user("active")
        dropped = create_user("dropped")
        enroll(klass, active)
        enroll(klass, dropped, status=Enrollment.Status.DROPPED)

        assert services.class_roster_user_ids(klass.pk) == [teacher.pk, active.pk]

    def test_unknown_class_has_empty_roster(self):
        assert services.class_roster_user_ids(424242) == []

    def test_record_attendance(self):
        teacher = create_user("teach", role="teacher")
        klass = create_class(teacher)
        enrollment = enroll(klass, create_user("stud"))

        entry = services.record_attendance(
            enrollment, date="2030-02-01", status="late", recorded_by=teacher
        )
        assert entry.enrollment_id == enrollment.pk
        assert enrollment.attendance.count() == 1
