from tests.factories import create_announcement
from tests.factories import create_content_item
from tests.permissions.mixins import ROLE_ADMIN
from tests.permissions.mixins import ROLE_OTHER_STUDENT
from tests.permissions.mixins import ROLE_OTHER_TEACHER
from tests.permissions.mixins import ROLE_STUDENT
from tests.permissions.mixins import ROLE_TEACHER
from tests.permissions.mixins import RoleAPITestCase


class ClassPermissionsTests(RoleAPITestCase):
    def test_everyone_lists_classes(self):
        for role in self.users:
            self.assert_allowed(self.get("/api/classes/classes/", role=role))

    def test_update_by_owner_or_admin(self):
        url = f"/api/classes/classes/{self.klass.pk}/"
        for role in (ROLE_TEACHER, ROLE_ADMIN):
            self.assert_allowed(self.patch(url, role=role, payload={"status": "active"}))
        for role in (ROLE_OTHER_TEACHER, ROLE_STUDENT):
            self.assert_denied(self.patch(url, role=role, payload={"status": "active"}))

    def test_enrollments_by_class(self):
        url = f"/api/classes/enrollments/class/{self.klass.pk}/"
        self.assert_allowed(self.get(url, role=ROLE_TEACHER))
        self.assert_allowed(self.get(url, role=ROLE_ADMIN))
        self.assert_denied(self.get(url, role=ROLE_OTHER_TEACHER))
        self.assert_denied(self.get(url, role=ROLE_STUDENT))

    def test_enrollment_detail(self):
        url = f"/api/classes/enrollments/{self.enrollment.pk}/"
        for role in (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN):
            self.assert_allowed(self.get(url, role=role))
        for role in (ROLE_OTHER_STUDENT, ROLE_OTHER_TEACHER):
            self.assert_denied(self.get(url, role=role))


class ContentPermissionsTests(RoleAPITestCase):
    def test_create_is_for_staff(self):
        payload = {
            "title": "Clip",
            "description": "",
            "type": "video",
            "class_id": self.klass.pk,
        }
        self.assert_allowed(self.post("/api/content/content-items/", role=ROLE_TEACHER, payload=payload))
        self.assert_denied(self.post("/api/content/content-items/", role=ROLE_STUDENT, payload=payload))

    def test_delete_by_author_or_admin(self):
        for role, allowed in (
            (ROLE_STUDENT, False),
            (ROLE_OTHER_TEACHER, False),
            (ROLE_ADMIN, True),
        ):
            item = create_content_item(self.klass, self.users[ROLE_TEACHER])
            response = self.delete(f"/api/content/content-items/{item.pk}/", role=role)
            if allowed:
                self.assert_allowed(response)
            else:
                self.assert_denied(response)


class AnnouncementPermissionsTests(RoleAPITestCase):
    def test_students_cannot_edit(self):
        announcement = create_announcement(self.users[ROLE_TEACHER])
        url = f"/api/communications/announcements/{announcement.pk}/"
        self.assert_denied(self.patch(url, role=ROLE_STUDENT, payload={"title": "x"}))
        self.assert_denied(self.patch(url, role=ROLE_OTHER_TEACHER, payload={"title": "x"}))

    def test_unauthenticated_is_401(self):
        self.client.force_authenticate(user=None)
        self.assert_denied(self.client.get("/api/communications/announcements/"), code=401)
