import pytest

from school_hub.users.auth_backends import EmailOrUsernameBackend
from tests.factories import TEST_PASSWORD
from tests.factories import create_user

pytestmark = pytest.mark.django_db


class TestEmailOrUsernameBackend:
    def setup_method(self):
        self.backend = EmailOrUsernameBackend()
        self.user = create_user("casey")

    @pytest.mark.parametrize("identifier", ["casey", "CASEY", "casey@example.com", "Casey@Example.com"])
    def test_authenticates_with_either_identifier(self, identifier):
        assert self.backend.authenticate(None, username=identifier, password=TEST_PASSWORD) == self.user

    def test_wrong_password(self):
        assert self.backend.authenticate(None, username="casey", password="wrong") is None

    def test_unknown_identifier(self):
        assert self.backend.authenticate(None, username="nobody", password=TEST_PASSWORD) is None

    def test_inactive_user_is_rejected(self):
        self.user.status = "inactive"
        self.user.save()
        assert self.backend.authenticate(None, username="casey", password=TEST_PASSWORD) is None

    def test_email_keyword(self):
        user = self.backend.authenticate(None, email="casey@example.com", password=TEST_PASSWORD)
        assert user == self.user
