import pytest

from school_hub.users.models import User
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_status_drives_is_active():
    user = create_user("flip")
    assert user.is_active is True
    user.status = User.Status.SUSPENDED
    user.save()
    user.refresh_from_db()
    assert user.is_active is False


def test_email_is_normalised():
    user = User.objects.create_user(username="mixed", email=" Mixed@Example.COM ", password="x")
    assert user.email == "mixed@example.com"


def test_superuser_is_admin():
    user = User.objects.create_superuser("root", "root@example.com", "x")
    assert user.role == User.Role.ADMIN
    assert user.is_admin


def test_default_preferences_are_not_shared():
    first = create_user("first")
    second = create_user("second")
    first.preferences["theme"] = "dark"
    assert second.preferences["theme"] == "light"
