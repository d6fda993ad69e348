from __future__ import annotations

import pytest

from rackview.subscriptions import EventSource, Subscription


def test_subscription_releases_once() -> None:
    calls = []
    sub = Subscription(lambda: calls.append("released"), name="demo")

    assert not sub.closed
    sub.close()
    sub.close()
    assert sub.closed
    assert calls == ["released"]
    assert "closed" in repr(sub)


def test_subscription_context_manager_releases_on_error() -> None:
    calls = []
    with pytest.raises(RuntimeError):
        with Subscription(lambda: calls.append(1)):
            raise RuntimeError("boom")
    assert calls == [1]


def test_event_source_delivers_in_registration_order() -> None:
    source: EventSource[int] = EventSource("numbers")
    seen = []
    source.subscribe(lambda v: seen.append(("a", v)))
    source.subscribe(lambda v: seen.append(("b", v)))

    source.emit(3)
    assert seen == [("a", 3), ("b", 3)]
    assert len(source) == 2


def test_closed_subscription_stops_delivery() -> None:
    source: EventSource[str] = EventSource("text")
    seen = []
    sub = source.subscribe(seen.append)
    sub.close()
    source.emit("ignored")
    assert seen == []
    assert len(source) == 0


def test_failing_listener_warns_and_others_still_run() -> None:
    source: EventSource[int] = EventSource("numbers")
    seen = []

    def bad(_value: int) -> None:
        raise ValueError("nope")

    source.subscribe(bad)
    source.subscribe(seen.append)

    with pytest.warns(UserWarning, match="numbers listener"):
        source.emit(1)
    assert seen == [1]


def test_non_callable_listener_is_rejected() -> None:
    with pytest.raises(TypeError):
        EventSource("x").subscribe(42)  # type: ignore[arg-type]
