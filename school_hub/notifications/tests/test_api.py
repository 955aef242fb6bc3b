import pytest
from rest_framework.test import APIClient

from school_hub.notifications.models import Notification
from school_hub.notifications.services import notify
from school_hub.notifications.services import notify_many
from tests.factories import create_user

NOTIFICATIONS_URL = "/api/communications/notifications/"


@pytest.mark.django_db
class TestNotificationAPI:
    def setup_method(self):
        self.client = APIClient()
        self.user = create_user("reader")
        self.other = create_user("other")
        self.first = notify(self.user.pk, "First", "one")
        self.second = notify(self.user.pk, "Second", "two", notification_type="success")
        self.foreign = notify(self.other.pk, "Not yours", "three")
        self.client.force_authenticate(user=self.user)

    def test_list_is_scoped_and_newest_first(self):
        res = self.client.get(NOTIFICATIONS_URL)
        assert res.status_code == 200
        assert [row["id"] for row in res.data] == [self.second.pk, self.first.pk]
        assert res.data[0]["unread"] is True

    def test_mark_read(self):
        res = self.client.post(f"{NOTIFICATIONS_URL}{self.first.pk}/read/")
        assert res.status_code == 200
        assert res.data["is_read"] is True
        self.first.refresh_from_db()
        assert self.first.read_at is not None

    def test_mark_read_with_put(self):
        res = self.client.put(f"{NOTIFICATIONS_URL}{self.first.pk}/read/")
        assert res.status_code == 200

    def test_other_users_notification_is_404(self):
        assert self.client.post(f"{NOTIFICATIONS_URL}{self.foreign.pk}/read/").status_code == 404
        assert self.client.delete(f"{NOTIFICATIONS_URL}{self.foreign.pk}/").status_code == 404
        self.foreign.refresh_from_db()
        assert self.foreign.is_read is False

    def test_read_all(self):
        res = self.client.post(f"{NOTIFICATIONS_URL}read-all/")
        assert res.status_code == 200
        assert res.data == {"updated": 2}
        assert not Notification.objects.filter(recipient=self.user, is_read=False).exists()
        assert Notification.objects.get(pk=self.foreign.pk).is_read is False

    def test_delete(self):
        res = self.client.delete(f"{NOTIFICATIONS_URL}{self.first.pk}/")
        assert res.status_code == 204
        assert not Notification.objects.filter(pk=self.first.pk).exists()

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        assert self.client.get(NOTIFICATIONS_URL).status_code == 401


@pytest.mark.django_db
def test_notify_many_skips_duplicate_recipients():
    a = create_user("a")
    b = create_user("b")
    created = notify_many([b.pk, a.pk, b.pk], "Heads up", "Something happened")
    assert len(created) == 2
    assert set(Notification.objects.values_list("recipient_id", flat=True)) == {a.pk, b.pk}
