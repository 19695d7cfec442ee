import logging

from nanosite.collections import EntryMap
from nanosite.events import EnrichmentChannel, EnrichmentEvent
from nanosite.protocols import EnrichmentListener


def test_channel_delivers_and_unsubscribes():
    channel = EnrichmentChannel()
    received = []
    unsubscribe = channel.subscribe(received.append)
    event = EnrichmentEvent(EntryMap(), "en", "index")

    channel.publish(event)
    unsubscribe()
    unsubscribe()
    channel.publish(event)

    assert received == [event]
    assert len(channel) == 0


def test_failing_listener_does_not_block_others(caplog):
    channel = EnrichmentChannel()
    received = []

    def broken(event):
        raise RuntimeError("render failed")

    channel.subscribe(broken)
    channel.subscribe(received.append)
    with caplog.at_level(logging.ERROR, logger="nanosite.events"):
        channel.publish(EnrichmentEvent(EntryMap(), "zh"))
    assert len(received) == 1
    assert received[0].lang == "zh"
    assert "render failed" in caplog.text


def test_listener_protocol_accepts_plain_callables():
    assert isinstance(print, EnrichmentListener)
