from __future__ import annotations

from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import create_class
from tests.factories import create_user
from tests.factories import enroll

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_OTHER_TEACHER = "other_teacher"
ROLE_STUDENT = "student"
ROLE_OTHER_STUDENT = "other_student"


class RoleAPITestCase(APITestCase):
    """Base test case with one user per role and a class taught by ``teacher``.

    ``student`` is actively enrolled in the class, ``other_student`` is not.
    """

    def setUp(self):
        super().setUp()
        self.users = {
            ROLE_ADMIN: create_user("admin", role="admin"),
            ROLE_TEACHER: create_user("teacher", role="teacher"),
            ROLE_OTHER_TEACHER: create_user("teacher2", role="teacher"),
            ROLE_STUDENT: create_user("student", role="student"),
            ROLE_OTHER_STUDENT: create_user("student2", role="student"),
        }
        self.klass = create_class(self.users[ROLE_TEACHER])
        self.enrollment = enroll(self.klass, self.users[ROLE_STUDENT])

    # Utilities -------------------------------------------------------------
    def authenticate(self, role: str):
        self.client.force_authenticate(user=self.users[role])

    def get(self, url: str, *, role: str, **kwargs):
        self.authenticate(role)
        return self.client.get(url, **kwargs)

    def post(self, url: str, *, role: str, payload=None, **kwargs):
        self.authenticate(role)
        return self.client.post(url, data=payload or {}, format="json", **kwargs)

    def patch(self, url: str, *, role: str, payload=None, **kwargs):
        self.authenticate(role)
        return self.client.patch(url, data=payload or {}, format="json", **kwargs)

    def delete(self, url: str, *, role: str, **kwargs):
        self.authenticate(role)
        return self.client.delete(url, **kwargs)

    def assert_allowed(self, response):
        assert response.status_code in (
            status.HTTP_200_OK,
            status.HTTP_201_CREATED,
            status.HTTP_204_NO_CONTENT,
        ), response.data

    def assert_denied(self, response, code=status.HTTP_403_FORBIDDEN):
        assert response.status_code == code, response.data
