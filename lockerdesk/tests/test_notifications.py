from __future__ import annotations

import asyncio
import json
import logging

from lockerdesk.core.entities.notification import Notification, NotificationType
from lockerdesk.infrastructure.logging_config import JSONFormatter
from lockerdesk.infrastructure.notifications import NotificationHub, QueueSubscriber


def _notification(unit_id: int) -> Notification:
    return Notification(type=NotificationType.STORAGE_UPDATED, payload={"unit_id": unit_id})


def test_subscribers_receive_events_in_publish_order(hub: NotificationHub) -> None:
    first: list[int] = []
    second: list[int] = []
    hub.subscribe(lambda n: first.append(n.payload["unit_id"]), name="first")
    hub.subscribe(lambda n: second.append(n.payload["unit_id"]), name="second")

    for unit_id in (3, 1, 2):
        hub.publish(_notification(unit_id))

    assert first == [3, 1, 2]
    assert second == [3, 1, 2]


def test_failing_subscriber_does_not_affect_others(hub: NotificationHub, events, caplog) -> None:
    def _broken(notification: Notification) -> None:
        raise RuntimeError("socket closed")

    hub.subscribe(_broken, name="broken")

    with caplog.at_level(logging.ERROR, logger="lockerdesk"):
        hub.publish(_notification(1))
        hub.publish(_notification(2))

    assert [e.payload["unit_id"] for e in events] == [1, 2]
    assert sum("could not be delivered to broken" in r.getMessage() for r in caplog.records) == 2


def test_unsubscribed_callbacks_receive_nothing(hub: NotificationHub) -> None:
    received: list[Notification] = []
    subscription = hub.subscribe(received.append, name="temp")
    hub.unsubscribe(subscription)
    hub.unsubscribe(subscription)

    hub.publish(_notification(1))

    assert received == []
    assert hub.subscriber_count == 0


def test_message_shape() -> None:
    message = _notification(4).to_message()

    assert message["type"] == "storage-updated"
    assert message["payload"] == {"unit_id": 4}
    assert isinstance(message["emitted_at"], str)
    json.dumps(message)


def test_queue_subscriber_drops_events_when_full(caplog) -> None:
    loop = asyncio.new_event_loop()
    try:
        subscriber = QueueSubscriber(loop, maxsize=2, name="slow-dashboard")
        with caplog.at_level(logging.WARNING, logger="lockerdesk"):
            for unit_id in (1, 2, 3):
                subscriber(_notification(unit_id))
            loop.run_until_complete(asyncio.sleep(0.01))

        delivered = [subscriber.queue.get_nowait()["payload"]["unit_id"] for _ in range(subscriber.queue.qsize())]
    finally:
        loop.close()

    assert delivered == [1, 2]
    assert any("slow-dashboard" in r.getMessage() for r in caplog.records)


def test_json_formatter_keeps_extra_fields() -> None:
    record = logging.LogRecord("lockerdesk.test", logging.WARNING, __file__, 1, "Invalid access code", None, None)
    record.unit_id = 7
    record.audit = "release_denied"

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Invalid access code"
    assert data["level"] == "WARNING"
    assert data["unit_id"] == 7
    assert data["audit"] == "release_denied"
