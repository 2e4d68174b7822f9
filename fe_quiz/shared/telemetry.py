import logging
import sys
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from prometheus_client import REGISTRY, Counter, Histogram

# --- Context for Correlation IDs ---
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="system")

# --- Prometheus Metric Definitions ---
METRIC_NAME = "fe_quiz_method_duration_seconds"
ANSWERS_METRIC_NAME = "fe_quiz_answers"

METHOD_DURATION: Histogram
ANSWERS_TOTAL: Counter

try:
    METHOD_DURATION = Histogram(
        METRIC_NAME, "Time spent in method", ["component", "method"]
    )
except ValueError:
    # Module re-imported (Streamlit reload): reuse the registered collector.
    _collector = REGISTRY._names_to_collectors[METRIC_NAME]
    METHOD_DURATION = cast(Histogram, _collector)

try:
    ANSWERS_TOTAL = Counter(
        ANSWERS_METRIC_NAME, "Submitted answers", ["category", "result"]
    )
except ValueError:
    _collector = REGISTRY._names_to_collectors[ANSWERS_METRIC_NAME + "_total"]
    ANSWERS_TOTAL = cast(Counter, _collector)

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
            # Used on instance methods: args[0] is 'self'.
            self_obj: Any = args[0] if args else None
            component = self_obj.__class__.__name__ if self_obj else "Unknown"
            telemetry = getattr(self_obj, "telemetry", None)

            start = time.perf_counter()
            failure: Exception | None = None
            try:
                return func(*args, **kwargs)
            except Exception as e:
                failure = e
                raise
            finally:
                duration = time.perf_counter() - start
                METHOD_DURATION.labels(
                    component=component, method=func.__name__
                ).observe(duration)
                duration_ms = round(duration * 1000, 2)
                if telemetry and failure is None:
                    telemetry.log_info(f"⏱️ {metric_name}", duration_ms=duration_ms)
                elif telemetry and failure is not None:
                    telemetry.log_error(
                        f"💥 Failed: {metric_name}", failure, duration_ms=duration_ms
                    )

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

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    @staticmethod
    def start_trace() -> str:
        c_id = str(uuid.uuid4())[:8]
        correlation_id_ctx.set(c_id)
        return c_id

    @staticmethod
    def get_trace_id() -> str:
        return correlation_id_ctx.get()

    def log_info(self, event: str, **kwargs: Any) -> None:
        trace_id = self.get_trace_id()
        msg = f"[{trace_id}] {event} | {kwargs}"
        self.logger.info(msg)

    def log_warning(self, event: str, **kwargs: Any) -> None:
        trace_id = self.get_trace_id()
        msg = f"[{trace_id}] ⚠️ {event} | {kwargs}"
        self.logger.warning(msg)

    def log_error(self, event: str, error: Exception, **kwargs: Any) -> None:
        trace_id = self.get_trace_id()
        msg = f"[{trace_id}] ❌ {event} | Error: {str(error)} | {kwargs}"
        self.logger.error(msg, exc_info=True)

    @staticmethod
    def count_answer(category: str, is_correct: bool) -> None:
        ANSWERS_TOTAL.labels(
            category=category, result="correct" if is_correct else "incorrect"
        ).inc()
