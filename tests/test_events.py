"""Koleksiyon olayları unit testleri."""

from src.inventory.events import CollectionEvent, EventBus, EventType


class TestEventBus:
    """Yazma sonrası snapshot yayını."""

    def test_publish_reaches_subscribers(self):
        bus = EventBus()
        received: list[CollectionEvent] = []
        bus.subscribe(EventType.INVENTORY_REPLACED, received.append)

        event = bus.publish(EventType.INVENTORY_REPLACED, ["a", "b"], pharmacy_id="ph-1")

        assert received == [event]
        assert event.payload == ("a", "b")
        assert event.pharmacy_id == "ph-1"

    def test_only_matching_event_type(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.CATALOG_REPLACED, received.append)
        bus.publish(EventType.INVENTORY_REPLACED, [])
        assert received == []

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("handler patladı")

        bus.subscribe(EventType.INVENTORY_REPLACED, broken)
        bus.subscribe(EventType.INVENTORY_REPLACED, received.append)
        bus.publish(EventType.INVENTORY_REPLACED, [1])
        assert len(received) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.INVENTORY_REPLACED, received.append)
        assert bus.unsubscribe(EventType.INVENTORY_REPLACED, received.append) is True
        assert bus.unsubscribe(EventType.INVENTORY_REPLACED, received.append) is False
        bus.publish(EventType.INVENTORY_REPLACED, [1])
        assert received == []

    def test_event_log(self):
        bus = EventBus()
        bus.publish(EventType.INVENTORY_REPLACED, [])
        bus.publish(EventType.CATALOG_REPLACED, [])
        assert [e.event_type for e in bus.get_event_log()] == [
            EventType.INVENTORY_REPLACED,
            EventType.CATALOG_REPLACED,
        ]
