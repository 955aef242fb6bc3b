from datetime import date
from unittest import mock

import pytest
from rest_framework.test import APIClient

from school_hub.classes.models import AttendanceEntry
from school_hub.classes.models import Class
from school_hub.classes.models import Enrollment
from school_hub.communication.models import Announcement
from tests.factories import create_announcement
from tests.factories import create_class
from tests.factories import create_user
from tests.factories import enroll

CLASSES_URL = "/api/classes/classes/"
ENROLLMENTS_URL = "/api/classes/enrollments/"


def class_payload(**overrides):
    payload = {
        "name": "Biology",
        "description": "Cells and living things",
        "subject": "science",
        "grade_level": "10",
        "start_date": "2030-01-10",
        "end_date": "2030-06-10",
        "capacity": 25,
        "schedule": [
            {
                "day_of_week": 1,
                "start_time": "09:00",
                "end_time": "10:30",
                "location": "Lab 2",
            }
        ],
        "tags": ["lab", "stem"],
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestClassAPI:
    def setup_method(self):
        self.client = APIClient()
        self.admin = create_user("admin", role="admin")
        self.teacher = create_user("teach", role="teacher")
        self.student = create_user("stud", role="student")

    def test_teacher_owns_created_class(self):
        self.client.force_authenticate(user=self.teacher)
        res = self.client.post(CLASSES_URL, class_payload(), format="json")
        assert res.status_code == 201, res.data
        assert res.data["teacher_id"] == self.teacher.pk
        assert res.data["enrollment_count"] == 0
        assert res.data["schedule"][0]["location"] == "Lab 2"

    def test_admin_must_name_teacher(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.post(CLASSES_URL, class_payload(), format="json")
        assert res.status_code == 400
        assert "teacher_id" in res.data

        res = self.client.post(
            CLASSES_URL, class_payload(teacher_id=self.teacher.pk), format="json"
        )
        assert res.status_code == 201, res.data
        assert res.data["teacher_details"]["username"] == "teach"

    def test_student_cannot_create(self):
        self.client.force_authenticate(user=self.student)
        res = self.client.post(CLASSES_URL, class_payload(), format="json")
        assert res.status_code == 403
        assert res.data["message"]

    def test_end_date_must_follow_start_date(self):
        self.client.force_authenticate(user=self.teacher)
        res = self.client.post(
            CLASSES_URL, class_payload(end_date="2030-01-01"), format="json"
        )
        assert res.status_code == 400
        assert "end_date" in res.data

    def test_invalid_schedule_time(self):
        self.client.force_authenticate(user=self.teacher)
        slot = {"day_of_week": 8, "start_time": "25:00", "end_time": "10:00", "location": "A"}
        res = self.client.post(CLASSES_URL, class_payload(schedule=[slot]), format="json")
        assert res.status_code == 400

    def test_unauthenticated(self):
        res = self.client.get(CLASSES_URL)
        assert res.status_code == 401

    def test_list_filters(self):
        math = create_class(self.teacher, name="Algebra", subject="math", tags=["core"])
        create_class(
            self.teacher, name="Art", subject="art", tags=["elective"], grade_level="7"
        )
        self.client.force_authenticate(user=self.student)

        res = self.client.get(CLASSES_URL, {"subject": "MATH"})
        assert [row["id"] for row in res.data] == [math.pk]

        res = self.client.get(CLASSES_URL, {"tags": "elective, other"})
        assert [row["name"] for row in res.data] == ["Art"]

        res = self.client.get(CLASSES_URL, {"grade_level": "7"})
        assert len(res.data) == 1

        res = self.client.get(CLASSES_URL, {"teacher": self.teacher.pk})
        assert len(res.data) == 2

    def test_list_ordered_by_start_date(self):
        late = create_class(self.teacher, name="Late", start_date=date(2031, 1, 1))
        early = create_class(self.teacher, name="Early")
        self.client.force_authenticate(user=self.student)
        res = self.client.get(CLASSES_URL)
        assert [row["id"] for row in res.data] == [early.pk, late.pk]

    def test_only_owner_or_admin_updates(self):
        klass = create_class(self.teacher)
        other = create_user("teach2", role="teacher")

        self.client.force_authenticate(user=other)
        res = self.client.patch(f"{CLASSES_URL}{klass.pk}/", {"name": "X"}, format="json")
        assert res.status_code == 403

        self.client.force_authenticate(user=self.teacher)
        res = self.client.patch(f"{CLASSES_URL}{klass.pk}/", {"name": "X"}, format="json")
        assert res.status_code == 200
        assert res.data["name"] == "X"

    def test_capacity_cannot_drop_below_enrollment_count(self):
        klass = create_class(self.teacher, capacity=5)
        enroll(klass, create_user("s1"))
        enroll(klass, create_user("s2"))

        self.client.force_authenticate(user=self.teacher)
        res = self.client.patch(f"{CLASSES_URL}{klass.pk}/", {"capacity": 1}, format="json")
        assert res.status_code == 400
        assert "capacity" in res.data

    def test_teacher_cannot_reassign(self):
        klass = create_class(self.teacher)
        other = create_user("teach2", role="teacher")
        self.client.force_authenticate(user=self.teacher)
        res = self.client.patch(
            f"{CLASSES_URL}{klass.pk}/", {"teacher_id": other.pk}, format="json"
        )
        assert res.status_code == 403

    def test_delete_is_admin_only_and_removes_enrollments(self):
        klass = create_class(self.teacher)
        enroll(klass, self.student)

        self.client.force_authenticate(user=self.teacher)
        assert self.client.delete(f"{CLASSES_URL}{klass.pk}/").status_code == 403

        self.client.force_authenticate(user=self.admin)
        assert self.client.delete(f"{CLASSES_URL}{klass.pk}/").status_code == 204
        assert not Class.objects.filter(pk=klass.pk).exists()
        assert not Enrollment.objects.filter(klass_id=klass.pk).exists()

    def test_delete_publishes_removed_class_announcements(
        self, django_capture_on_commit_callbacks
    ):
        klass = create_class(self.teacher)
        enroll(klass, self.student)
        announcement = create_announcement(
            self.teacher,
            audience_type=Announcement.AudienceType.CLASS,
            audience_class=klass,
        )
        create_announcement(self.admin)

        self.client.force_authenticate(user=self.admin)
        with mock.patch(
            "school_hub.realtime.events.communication.emit_event_to_user"
        ) as emit:
            with django_capture_on_commit_callbacks(execute=True):
                res = self.client.delete(f"{CLASSES_URL}{klass.pk}/")

        assert res.status_code == 204
        assert not Announcement.objects.filter(pk=announcement.pk).exists()
        assert Announcement.objects.count() == 1
        payload = {"announcementId": announcement.pk}
        assert emit.call_args_list == [
            mock.call(self.teacher.pk, "announcement-deleted", payload),
            mock.call(self.student.pk, "announcement-deleted", payload),
        ]


@pytest.mark.django_db
class TestEnrollmentAPI:
    def setup_method(self):
        self.client = APIClient()
        self.admin = create_user("admin", role="admin")
        self.teacher = create_user("teach", role="teacher")
        self.student = create_user("stud", role="student")
        self.klass = create_class(self.teacher, capacity=1)

    def test_student_enrolls(self):
        self.client.force_authenticate(user=self.student)
        res = self.client.post(ENROLLMENTS_URL, {"class_id": self.klass.pk}, format="json")
        assert res.status_code == 201, res.data
        assert res.data["class_id"] == self.klass.pk
        assert res.data["status"] == "active"

    def test_teacher_cannot_enroll(self):
        self.client.force_authenticate(user=self.teacher)
        res = self.client.post(ENROLLMENTS_URL, {"class_id": self.klass.pk}, format="json")
        assert res.status_code == 403

    def test_unknown_class_is_404(self):
        self.client.force_authenticate(user=self.student)
        res = self.client.post(ENROLLMENTS_URL, {"class_id": 987654}, format="json")
        assert res.status_code == 404
        assert res.data["message"] == "Class not found"

    def test_class_full_then_drop_then_enroll(self):
        first = create_user("first")
        first_enrollment = enroll(self.klass, first)

        self.client.force_authenticate(user=self.student)
        res = self.client.post(ENROLLMENTS_URL, {"class_id": self.klass.pk}, format="json")
        assert res.status_code == 400
        assert res.data["message"] == "Class is full"

        self.client.force_authenticate(user=first)
        res = self.client.patch(
            f"{ENROLLMENTS_URL}{first_enrollment.pk}/", {"status": "dropped"}, format="json"
        )
        assert res.status_code == 200, res.data

        self.client.force_authenticate(user=self.student)
        res = self.client.post(ENROLLMENTS_URL, {"class_id": self.klass.pk}, format="json")
        assert res.status_code == 201
        self.klass.refresh_from_db()
        assert self.klass.enrollment_count == 1

    def test_student_cannot_complete_own_enrollment(self):
        enrollment = enroll(self.klass, self.student)
        self.client.force_authenticate(user=self.student)
        res = self.client.patch(
            f"{ENROLLMENTS_URL}{enrollment.pk}/", {"status": "completed"}, format="json"
        )
        assert res.status_code == 403

    def test_student_cannot_grade(self):
        enrollment = enroll(self.klass, self.student)
        self.client.force_authenticate(user=self.student)
        res = self.client.patch(
            f"{ENROLLMENTS_URL}{enrollment.pk}/", {"grade": "A"}, format="json"
        )
        assert res.status_code == 403

    def test_teacher_grades(self):
        enrollment = enroll(self.klass, self.student)
        self.client.force_authenticate(user=self.teacher)
        res = self.client.patch(
            f"{ENROLLMENTS_URL}{enrollment.pk}/", {"grade": "A-"}, format="json"
        )
        assert res.status_code == 200
        assert res.data["grade"] == "A-"

    def test_empty_update_rejected(self):
        enrollment = enroll(self.klass, self.student)
        self.client.force_authenticate(user=self.teacher)
        res = self.client.patch(f"{ENROLLMENTS_URL}{enrollment.pk}/", {}, format="json")
        assert res.status_code == 400

    def test_other_student_cannot_view(self):
        enrollment = enroll(self.klass, self.student)
        self.client.force_authenticate(user=create_user("nosy"))
        res = self.client.get(f"{ENROLLMENTS_URL}{enrollment.pk}/")
        assert res.status_code == 403

    def test_student_listing_includes_class_details(self):
        enroll(self.klass, self.student)
        self.client.force_authenticate(user=self.student)
        res = self.client.get(f"{ENROLLMENTS_URL}student/")
        assert res.status_code == 200
        assert len(res.data) == 1
        assert res.data[0]["class"]["name"] == self.klass.name
        assert res.data[0]["enrollment"]["status"] == "active"

    def test_class_listing_is_for_teacher_or_admin(self):
        enroll(self.klass, self.student)
        url = f"{ENROLLMENTS_URL}class/{self.klass.pk}/"

        self.client.force_authenticate(user=self.student)
        assert self.client.get(url).status_code == 403

        self.client.force_authenticate(user=self.teacher)
        res = self.client.get(url)
        assert res.status_code == 200
        assert res.data[0]["student"]["username"] == "stud"

        self.client.force_authenticate(user=self.admin)
        assert self.client.get(url).status_code == 200
        assert self.client.get(f"{ENROLLMENTS_URL}class/555555/").status_code == 404

    def test_attendance_recorded_by_teacher(self):
        enrollment = enroll(self.klass, self.student)
        url = f"{ENROLLMENTS_URL}{enrollment.pk}/attendance/"
        payload = {"date": "2030-02-03", "status": "present", "notes": "On time"}

        self.client.force_authenticate(user=self.student)
        assert self.client.post(url, payload, format="json").status_code == 403

        self.client.force_authenticate(user=self.teacher)
        res = self.client.post(url, payload, format="json")
        assert res.status_code == 201, res.data
        assert res.data["attendance"][0]["status"] == "present"
        entry = AttendanceEntry.objects.get(enrollment=enrollment)
        assert entry.recorded_by == self.teacher
