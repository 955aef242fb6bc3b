import pytest
from drf_spectacular.generators import SchemaGenerator
from rest_framework import status
from rest_framework.test import APIClient

from config.schema import service_tag
from tests.factories import create_user


@pytest.mark.parametrize(
    ("path", "tag"),
    [
        ("/api/auth/jwt/verify/", "JWT Authentication"),
        ("/api/auth/login/", "Authentication"),
        ("/api/classes/enrollments/{id}/", "Enrollments"),
        ("/api/classes/classes/", "Classes"),
        ("/api/content/content-modules/", "Content Modules"),
        ("/api/communications/notifications/read-all/", "Notifications"),
        ("/health/", None),
    ],
)
def test_service_tag(path, tag):
    assert service_tag(path) == tag


def test_schema_tag_grouping(db):
    schema = SchemaGenerator().get_schema(request=None, public=True)
    paths = schema["paths"]
    expected = {
        "/api/auth/register/": ["Authentication"],
        "/api/users/users/": ["Users"],
        "/api/classes/enrollments/": ["Enrollments"],
        "/api/communications/messages/inbox/": ["Messages"],
        "/api/communications/announcements/": ["Announcements"],
    }
    for path, tags in expected.items():
        operation = next(iter(paths[path].values()))
        assert operation["tags"] == tags, path
    declared = {entry["name"] for entry in schema["tags"]}
    assert {"Classes", "Content Items", "Notifications"} <= declared


@pytest.mark.django_db
def test_docs_are_admin_only():
    client = APIClient()
    client.force_authenticate(user=create_user("stud"))
    assert client.get("/api/schema/").status_code == status.HTTP_403_FORBIDDEN

    client.force_authenticate(user=create_user("boss", role="admin", is_staff=True))
    assert client.get("/api/schema/").status_code == status.HTTP_200_OK
