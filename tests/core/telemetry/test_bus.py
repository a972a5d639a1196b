# tests/core/telemetry/test_bus.py
"""
Testes do TelemetryBus.

Os testes asseguram que:
- handlers recebem apenas os eventos aos quais se anexaram
- ids de handler são únicos; `detach` remove o handler
- um handler que falha é desanexado e não afeta o emissor
- `span` emite start e stop (com `duration`) ou exception e relança
"""

import pytest

try:
    from actionflow.core.telemetry import TelemetryBus, span_events
except Exception as e:  # noqa: BLE001
    TelemetryBus = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing telemetry bus. Implement:\n"
            "- src/actionflow/core/telemetry/bus.py (TelemetryBus)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _collector(sink):
    def handler(name, measurements, metadata, config):
        sink.append((name, measurements, metadata, config))

    return handler


def test_handler_receives_only_attached_events():
    _require_imports()
    bus = TelemetryBus()
    got = []
    bus.attach("h", [("app", "x")], _collector(got), config={"level": "info"})

    bus.execute(("app", "x"), {"n": 1}, {"k": "v"})
    bus.execute(("app", "y"), {"n": 2}, {})

    assert got == [(("app", "x"), {"n": 1}, {"k": "v"}, {"level": "info"})]


def test_duplicate_handler_id_is_rejected():
    _require_imports()
    bus = TelemetryBus()
    bus.attach("h", [("a",)], _collector([]))
    with pytest.raises(ValueError):
        bus.attach("h", [("a",)], _collector([]))


def test_detach():
    _require_imports()
    bus = TelemetryBus()
    got = []
    bus.attach("h", [("a",)], _collector(got))

    assert bus.detach("h") is True
    assert bus.detach("h") is False
    bus.execute(("a",), {}, {})
    assert got == []
    assert bus.handler_ids() == []


def test_failing_handler_is_detached_and_recorded():
    _require_imports()
    bus = TelemetryBus()
    got = []

    def broken(*_args):
        raise RuntimeError("handler bug")

    bus.attach("broken", [("a",)], broken)
    bus.attach("ok", [("a",)], _collector(got))

    bus.execute(("a",), {}, {})
    bus.execute(("a",), {}, {})

    assert bus.handler_ids() == ["ok"]
    assert len(got) == 2
    assert bus.handler_failures == [
        {"handler_id": "broken", "event": ("a",), "exception_type": "RuntimeError"}
    ]


def test_span_emits_start_and_stop_with_duration():
    _require_imports()
    bus = TelemetryBus()
    got = []
    bus.attach("h", span_events(("p",)), _collector(got))

    result = bus.span(("p",), {"phase": "pre"}, lambda: ("value", {"phase": "post"}))

    assert result == "value"
    assert [g[0] for g in got] == [("p", "start"), ("p", "stop")]
    assert "system_time" in got[0][1]
    assert got[0][2] == {"phase": "pre"}
    assert got[1][1]["duration"] >= 0
    assert got[1][2] == {"phase": "post"}


def test_span_emits_exception_and_reraises():
    _require_imports()
    bus = TelemetryBus()
    got = []
    bus.attach("h", span_events(("p",)), _collector(got))

    def body():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        bus.span(("p",), {"phase": "pre"}, body)

    assert [g[0] for g in got] == [("p", "start"), ("p", "exception")]
    meta = got[1][2]
    assert meta["kind"] == "error"
    assert meta["exception_type"] == "KeyError"
    assert meta["phase"] == "pre"
    assert got[1][1]["duration"] >= 0


def test_span_events_names():
    _require_imports()
    assert span_events(["a", "b"]) == [("a", "b", "start"), ("a", "b", "stop"), ("a", "b", "exception")]
