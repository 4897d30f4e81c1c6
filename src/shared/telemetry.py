import logging
import sys
import time
import uuid
from collections import deque
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

# --- Prometheus Imports ---
from prometheus_client import REGISTRY, Counter, Histogram

# --- Context for Correlation IDs ---
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="system")

# Recent error events, newest last. Read by the health check.
_RECENT_ERRORS: deque[dict[str, Any]] = deque(maxlen=200)


def _get_or_create(factory: Callable[[], Any], name: str) -> Any:
    """Streamlit re-executes modules on reload; reuse collectors already registered."""
    try:
        return factory()
    except ValueError:
        return REGISTRY._names_to_collectors[name]


# --- Prometheus Metric Definitions ---
METHOD_DURATION = cast(
    Histogram,
    _get_or_create(
        lambda: Histogram(
            "app_method_duration_seconds",
            "Time spent in method",
            ["component", "method"],
        ),
        "app_method_duration_seconds",
    ),
)

SESSIONS_STARTED = cast(
    Counter,
    _get_or_create(
        lambda: Counter("quiz_sessions_started", "Quiz sessions started", ["mode"]),
        "quiz_sessions_started_total",
    ),
)

ANSWERS_RECORDED = cast(
    Counter,
    _get_or_create(
        lambda: Counter("quiz_answers_recorded", "Answers submitted", ["correct"]),
        "quiz_answers_recorded_total",
    ),
)

STATS_BACKEND_FAILURES = cast(
    Counter,
    _get_or_create(
        lambda: Counter(
            "quiz_stats_backend_failures", "Stats backend errors", ["operation"]
        ),
        "quiz_stats_backend_failures_total",
    ),
)

# --- Type Definitions for Decorator ---
P = ParamSpec("P")
R = TypeVar("R")


def measure_time(metric_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator for timing methods + logging.
    Uses ParamSpec to preserve the signature of the decorated function.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()

            # args[0] is 'self' for the instance methods this decorates
            self_obj: Any = args[0] if args else None

            component = self_obj.__class__.__name__ if self_obj else "Unknown"
            method = func.__name__
            telemetry = getattr(self_obj, "telemetry", None)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start
                METHOD_DURATION.labels(component=component, method=method).observe(
                    duration
                )
                if telemetry:
                    telemetry.log_error(
                        f"💥 Failed: {metric_name}",
                        e,
                        duration_ms=round(duration * 1000, 2),
                    )
                raise

            duration = time.perf_counter() - start
            METHOD_DURATION.labels(component=component, method=method).observe(
                duration
            )
            if telemetry:
                telemetry.log_debug(
                    f"⏱️ {metric_name}", duration_ms=round(duration * 1000, 2)
                )
            return result

        return wrapper

    return decorator


class Telemetry:
    """
    Facade for Logs, Metrics, and Tracing.
    """

    def __init__(self, component_name: str) -> None:
        self.component = component_name
        self.logger: logging.Logger
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Initializes the logger. Safe to call multiple times."""
        self.logger = logging.getLogger(self.component)

        # Ensure we output to console if not configured
        if not self.logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def __getstate__(self) -> dict[str, Any]:
        """Pickling: Save everything EXCEPT the logger."""
        state = self.__dict__.copy()
        state.pop("logger", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        """Unpickling: Restore state and re-create logger."""
        self.__dict__.update(state)
        self._setup_logger()

    @staticmethod
    def start_trace() -> str:
        c_id = str(uuid.uuid4())[:8]
        correlation_id_ctx.set(c_id)
        return c_id

    @staticmethod
    def get_trace_id() -> str:
        return correlation_id_ctx.get()

    @staticmethod
    def recent_errors(
        limit: int | None = None, within_seconds: float | None = None
    ) -> list[dict[str, Any]]:
        errors = list(_RECENT_ERRORS)
        if within_seconds is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(seconds=within_seconds)
            errors = [
                e for e in errors if datetime.fromisoformat(e["timestamp"]) >= cutoff
            ]
        return errors[-limit:] if limit else errors

    @staticmethod
    def clear_recent_errors() -> None:
        _RECENT_ERRORS.clear()

    def _format(self, event: str, kwargs: dict[str, Any]) -> str:
        return f"[{self.get_trace_id()}] {event} | {kwargs}"

    def log_debug(self, event: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(event, kwargs))

    def log_info(self, event: str, **kwargs: Any) -> None:
        self.logger.info(self._format(event, kwargs))

    def log_warning(self, event: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(event, kwargs))

    def log_error(self, event: str, error: Exception, **kwargs: Any) -> None:
        _RECENT_ERRORS.append(
            {
                "component": self.component,
                "event": event,
                "error": str(error),
                "trace_id": self.get_trace_id(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )
        msg = f"[{self.get_trace_id()}] ❌ {event} | Error: {error} | {kwargs}"
        self.logger.error(msg, exc_info=True)
