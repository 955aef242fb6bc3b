"""End-to-end flows across services."""

from unittest import mock

import pytest
from asgiref.sync import async_to_sync
from rest_framework.test import APIClient

from school_hub.realtime import socketio as relay
from school_hub.realtime.socketio import sio
from tests.factories import create_class
from tests.factories import create_user


@pytest.mark.django_db(transaction=True)
def test_offline_recipient_finds_unread_notification():
    sender = create_user("sender", role="teacher")
    recipient = create_user("recipient")

    with (
        mock.patch.object(sio, "emit", new=mock.AsyncMock()) as emit,
        mock.patch.object(
            sio,
            "get_session",
            new=mock.AsyncMock(return_value={"user_id": sender.pk, "role": "teacher"}),
        ),
    ):
        ack = async_to_sync(relay.private_message)(
            "sid-sender",
            {"recipientId": recipient.pk, "subject": "Grades", "content": "Posted"},
        )
    assert ack["success"] is True
    # Emitted to an empty room: nobody was listening
    assert mock.call("new-message", mock.ANY, room=f"user_{recipient.pk}") in emit.await_args_list

    client = APIClient()
    client.force_authenticate(user=recipient)
    res = client.get("/api/communications/notifications/")
    assert res.status_code == 200
    assert len(res.data) == 1
    notification = res.data[0]
    assert notification["is_read"] is False
    assert notification["related_type"] == "message"
    assert notification["related_id"] == ack["messageId"]

    res = client.get("/api/communications/messages/inbox/")
    assert [m["id"] for m in res.data] == [ack["messageId"]]


@pytest.mark.django_db
def test_class_full_scenario():
    teacher = create_user("teach", role="teacher")
    klass = create_class(teacher, capacity=1)
    client = APIClient()

    client.force_authenticate(user=create_user("student_a"))
    res = client.post("/api/classes/enrollments/", {"class_id": klass.pk}, format="json")
    assert res.status_code == 201
    klass.refresh_from_db()
    assert klass.enrollment_count == 1

    client.force_authenticate(user=create_user("student_b"))
    res = client.post("/api/classes/enrollments/", {"class_id": klass.pk}, format="json")
    assert res.status_code == 400
    assert res.data["message"] == "Class is full"
    klass.refresh_from_db()
    assert klass.enrollment_count == 1
