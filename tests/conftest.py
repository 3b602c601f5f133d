# tests/conftest.py
import pytest

from traffic_sim.app.build import build
from traffic_sim.io.recorder import MemorySink, Recorder


@pytest.fixture
def make_app():
    """Build an app with an in-memory recorder; keyword args are merged into the scenario."""

    def _make(**overrides):
        cfg = {"name": "test", "run_id": "t-1", "sim": {"seed": 7}}
        cfg.update(overrides)
        sink = MemorySink()
        app = build(cfg, recorder=Recorder(sink))
        app.sink = sink
        return app

    return _make
