import pytest

from app.services.notifier import EventBroker, NullNotifier, publish_safely


def test_subscriber_receives_matching_topics_only():
    broker = EventBroker()
    sub = broker.subscribe({"contentTranslated"})

    broker.publish("campaignCreated", {"id": "c1"})
    broker.publish("contentTranslated", {"id": "v1"})

    event = sub.get(timeout=0.1)
    assert event.topic == "contentTranslated"
    assert event.payload == {"id": "v1"}
    assert sub.get(timeout=0.01) is None


def test_subscriber_without_topics_receives_everything():
    broker = EventBroker()
    sub = broker.subscribe()
    broker.publish("campaignCreated", {"id": "c1"})
    broker.publish("versionUpdated", {"id": "v1"})
    assert [sub.get(timeout=0.1).topic, sub.get(timeout=0.1).topic] == ["campaignCreated", "versionUpdated"]


def test_publish_without_subscribers_is_a_no_op():
    broker = EventBroker()
    broker.publish("campaignCreated", {"id": "c1"})
    assert broker.subscriber_count() == 0


def test_full_queue_drops_events_instead_of_raising():
    broker = EventBroker(queue_size=1)
    sub = broker.subscribe()
    broker.publish("campaignCreated", {"id": "c1"})
    broker.publish("campaignCreated", {"id": "c2"})

    assert sub.get(timeout=0.1).payload == {"id": "c1"}
    assert sub.get(timeout=0.01) is None


def test_closed_subscription_stops_receiving():
    broker = EventBroker()
    sub = broker.subscribe()
    sub.close()
    broker.publish("campaignCreated", {"id": "c1"})
    assert broker.subscriber_count() == 0
    assert sub.get(timeout=0.01) is None


def test_unknown_topic_subscription_is_rejected():
    with pytest.raises(ValueError, match="bogus"):
        EventBroker().subscribe({"bogus"})


def test_null_notifier_accepts_anything():
    assert NullNotifier().publish("campaignCreated", {"id": "c1"}) is None


def test_publish_safely_logs_notifier_errors(caplog):
    class Broken:
        def publish(self, topic, payload):
            raise RuntimeError("boom")

    publish_safely(Broken(), "campaignCreated", {"id": "c1"})

    assert "Notifier failed to publish campaignCreated event" in caplog.text


def test_publish_safely_delivers_through_the_broker():
    broker = EventBroker()
    sub = broker.subscribe({"campaignDeleted"})
    publish_safely(broker, "campaignDeleted", {"id": "c1"})
    assert sub.get(timeout=0.1).payload == {"id": "c1"}
