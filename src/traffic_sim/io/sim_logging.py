# io/sim_logging.py
import json
import logging
import sys

from traffic_sim.io.recorder import Recorder
from traffic_sim.sim.hooks import NoopHooks

ROOT_LOGGER = "traffic_sim"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", name: str = ROOT_LOGGER) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


def emit(logger: logging.Logger, level: int, msg: str, **fields) -> None:
    """Log ``msg`` with structured fields picked up by JsonFormatter."""
    if logger.isEnabledFor(level):
        logger.log(level, msg, extra={"extra": fields})


class SimLogging(NoopHooks):
    """
    Kernel hooks: run lifecycle and timer errors go to the JSON logger,
    business events go to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.clock, self.debug = run_id, clock, debug
        self.recorder = recorder
        self.log = logger or configure_logging(level=level)

    def _emit(self, level: int, msg: str, **extra):
        t = extra.get("t")
        if self.clock is not None and t is not None:
            extra["wall"] = self.clock.to_wall(t).isoformat()
        emit(self.log, level, msg, run_id=self.run_id, **extra)

    def run_start(self, *, until: float, dt: float, speed: float):
        self._emit(logging.INFO, "run_start", until=until, dt=dt, speed=speed)

    def run_end(self, *, ticks: int, last_t: float, **extra):
        self._emit(logging.INFO, "run_end", ticks=ticks, t=last_t, **extra)

    def dispatch(self, ev, *, qsize: int, handlers: int):
        if self.debug:
            self._emit(logging.DEBUG, type(ev).__name__, t=ev.t, qsize=qsize, handlers=handlers)

    def error(self, ev, *, reason: str, **extra):
        name = type(ev).__name__ if ev is not None else None
        self._emit(logging.ERROR, "kernel_error", event=name, reason=reason, **extra)

    def biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
