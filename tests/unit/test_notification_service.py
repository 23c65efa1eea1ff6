"""Unit tests for the notification sink."""

from datetime import UTC, datetime, timedelta

import pytest

from agencyhub.domain.notification import Notification, NotificationType
from agencyhub.services.notification_service import NotificationSink


BASE = datetime(2025, 6, 10, 10, 0, tzinfo=UTC)


def _notification(notification_id: str, *, minutes: int = 0, project_id: str = "proj-1", **fields) -> Notification:
    return Notification(
        id=notification_id,
        type=NotificationType.INFO,
        title="Title",
        message="Message",
        project_id=project_id,
        created_at=BASE + timedelta(minutes=minutes),
        **fields,
    )


@pytest.fixture
def populated_sink(sink: NotificationSink) -> NotificationSink:
    sink.publish(_notification("n-1", minutes=0))
    sink.publish(_notification("n-2", minutes=5, project_id="proj-2"))
    sink.publish(_notification("n-3", minutes=10))
    return sink


class TestPublish:
    """Tests for publishing and listener fan-out."""

    def test_listeners_receive_every_notification(self, sink):
        received = []
        sink.subscribe(received.append)

        sink.publish(_notification("n-1"))
        sink.publish(_notification("n-2"))

        assert [n.id for n in received] == ["n-1", "n-2"]

    def test_failing_listener_does_not_block_others(self, sink):
        received = []

        def broken(_notification):
            raise RuntimeError("badge renderer crashed")

        sink.subscribe(broken)
        sink.subscribe(received.append)

        sink.publish(_notification("n-1"))

        assert [n.id for n in received] == ["n-1"]
        assert len(sink) == 1

    def test_unsubscribe_stops_delivery(self, sink):
        received = []
        sink.subscribe(received.append)

        assert sink.unsubscribe(received.append) is True
        sink.publish(_notification("n-1"))

        assert received == []
        assert sink.unsubscribe(received.append) is False


class TestListing:
    """Tests for listing and ordering."""

    def test_list_preserves_insertion_order(self, populated_sink):
        assert [n.id for n in populated_sink.list_notifications()] == ["n-1", "n-2", "n-3"]

    def test_list_returns_copies(self, populated_sink):
        populated_sink.list_notifications()[0].is_read = True
        assert populated_sink.unread_count() == 3

    def test_filter_by_project(self, populated_sink):
        assert [n.id for n in populated_sink.list_notifications(project_id="proj-1")] == ["n-1", "n-3"]

    def test_unread_only(self, populated_sink):
        populated_sink.mark_read("n-1")
        assert [n.id for n in populated_sink.list_notifications(unread_only=True)] == ["n-2", "n-3"]

    def test_display_order_unread_first_then_newest(self, populated_sink):
        populated_sink.mark_read("n-3")
        assert [n.id for n in populated_sink.list_for_display()] == ["n-2", "n-1", "n-3"]


class TestReadState:
    """Tests for read/unread management."""

    def test_mark_read_and_unread(self, populated_sink):
        assert populated_sink.mark_read("n-1") is True
        assert populated_sink.unread_count() == 2

        assert populated_sink.mark_unread("n-1") is True
        assert populated_sink.unread_count() == 3

    def test_unknown_id(self, populated_sink):
        assert populated_sink.mark_read("missing") is False
        assert populated_sink.mark_unread("missing") is False
        assert populated_sink.delete("missing") is False
        assert len(populated_sink) == 3

    def test_mark_all_read_scoped_to_project(self, populated_sink):
        assert populated_sink.mark_all_read(project_id="proj-1") == 2
        assert populated_sink.unread_count() == 1
        assert populated_sink.mark_all_read() == 1
        assert populated_sink.mark_all_read() == 0


class TestRemoval:
    """Tests for delete and clear."""

    def test_delete(self, populated_sink):
        assert populated_sink.delete("n-2") is True
        assert [n.id for n in populated_sink.list_notifications()] == ["n-1", "n-3"]

    def test_clear_by_project(self, populated_sink):
        assert populated_sink.clear(project_id="proj-1") == 2
        assert [n.id for n in populated_sink.list_notifications()] == ["n-2"]

    def test_clear_all(self, populated_sink):
        assert populated_sink.clear() == 3
        assert len(populated_sink) == 0
