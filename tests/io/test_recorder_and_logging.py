# tests/io/test_recorder_and_logging.py
import io
import json
import logging

from traffic_sim.io.business_events import RiderSpawned
from traffic_sim.io.recorder import JsonlSink, MemorySink, Recorder
from traffic_sim.io.sim_logging import JsonFormatter, SimLogging, emit
from traffic_sim.sim.clock import SimClock


class BrokenSink:
    def write(self, ev):
        raise OSError("disk full")


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    Recorder(JsonlSink(buf)).emit(RiderSpawned(t=1.5, rider_id=3, pos=(10.0, 20.0)))
    line = json.loads(buf.getvalue())
    assert line == {"event": "RiderSpawned", "t": 1.5, "rider_id": 3, "pos": [10.0, 20.0]}


def test_failing_sink_is_logged_and_others_still_receive(caplog):
    mem = MemorySink()
    rec = Recorder(BrokenSink(), mem)
    with caplog.at_level(logging.ERROR, logger="traffic_sim.recorder"):
        rec.emit(RiderSpawned(t=0.0, rider_id=1, pos=(0.0, 0.0)))
    assert len(mem.of_type(RiderSpawned)) == 1
    assert any(r.getMessage() == "recorder_sink_failed" for r in caplog.records)


def test_json_formatter_includes_structured_fields():
    logger = logging.getLogger("traffic_sim.test_formatter")
    record = logger.makeRecord(
        logger.name,
        logging.WARNING,
        __file__,
        1,
        "no_driver_available",
        (),
        None,
        extra={"extra": {"ride_id": 4, "driver_type": "air"}},
    )
    out = json.loads(JsonFormatter().format(record))
    assert out["msg"] == "no_driver_available"
    assert out["level"] == "WARNING"
    assert (out["ride_id"], out["driver_type"]) == (4, "air")


def test_emit_respects_level(caplog):
    logger = logging.getLogger("traffic_sim.test_emit")
    with caplog.at_level(logging.DEBUG, logger="traffic_sim.test_emit"):
        logger.setLevel(logging.INFO)
        emit(logger, logging.DEBUG, "tick_heartbeat", ticks=60)
        emit(logger, logging.INFO, "ride_requested", ride_id=1)
    assert [r.getMessage() for r in caplog.records] == ["ride_requested"]
    assert caplog.records[0].extra == {"ride_id": 1}


def test_sim_logging_hooks(caplog):
    mem = MemorySink()
    hooks = SimLogging(
        run_id="r-9",
        clock=SimClock.utc_epoch(2025, 1, 1),
        logger=logging.getLogger("traffic_sim.test_hooks"),
        recorder=Recorder(mem),
    )
    with caplog.at_level(logging.INFO, logger="traffic_sim.test_hooks"):
        hooks.run_end(ticks=10, last_t=60.0, qsize=0, wall_ms=1.0)
        hooks.error(None, reason="scheduled_past")
    ev = RiderSpawned(t=0.0, rider_id=1, pos=(0.0, 0.0))
    hooks.biz(ev)
    end, err = caplog.records
    assert end.extra["run_id"] == "r-9"
    assert end.extra["wall"] == "2025-01-01T00:01:00+00:00"
    assert err.levelno == logging.ERROR and err.extra["reason"] == "scheduled_past"
    assert mem.events == [ev]
