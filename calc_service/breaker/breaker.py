"""Thread-safe circuit breaker guarding synchronous computations."""

import threading
import time
from enum import Enum
from typing import Any, Callable, NamedTuple

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger("breaker")

DEFAULT_PROTECTED_OPERATIONS = frozenset(
    {"addition", "subtraction", "multiplication", "division"}
)


class BreakerState(str, Enum):
    """Health state of a circuit breaker."""

    closed = "closed"
    open = "open"
    half_open = "half_open"


class CallStatus(str, Enum):
    """Outcome of a guarded call."""

    ok = "ok"
    rejected = "rejected"
    failed = "failed"


class BreakerConfig(BaseModel):
    """Configuration for a circuit breaker.

    Attributes:
        failure_threshold: Consecutive failures that open the circuit.
        recovery_timeout: Seconds the circuit stays open before a trial call.
        protected_operations: Operation names executed through the breaker.
    """

    failure_threshold: int = Field(default=5, ge=1, description="Failures before opening")
    recovery_timeout: float = Field(default=30.0, gt=0, description="Cooldown in seconds")
    protected_operations: frozenset[str] = Field(
        default=DEFAULT_PROTECTED_OPERATIONS,
        description="Operations routed through the breaker",
    )


class BreakerResult(NamedTuple):
    """Result of a guarded call.

    Attributes:
        status: Whether the thunk ran and succeeded, was rejected, or failed.
        value: Return value of the thunk when it succeeded.
        error: Exception raised by the thunk when it failed.
        retry_after: Seconds until a trial call is admitted (rejections only).
    """

    status: CallStatus
    value: Any = None
    error: Exception | None = None
    retry_after: float = 0.0


class CircuitBreaker:
    """Circuit breaker with closed, open and half-open states.

    Consecutive failures in the closed state open the circuit. While open,
    calls are rejected without running. Once the recovery timeout has passed
    on the monotonic clock a single trial call is admitted: success closes the
    circuit, failure opens it again.
    """

    def __init__(
        self,
        config: BreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the breaker in the closed state.

        Args:
            config: Breaker configuration. Uses defaults if not provided.
            clock: Monotonic time source in seconds.
        """
        self.config = config or BreakerConfig()
        self._clock = clock
        self._state = BreakerState.closed
        self._failures = 0
        self._opened_at = 0.0
        self._trial_in_flight = False
        self._lock = threading.Lock()

    def _cooldown_remaining(self, now: float) -> float:
        return max(0.0, self._opened_at + self.config.recovery_timeout - now)

    def _open(self, now: float) -> None:
        self._state = BreakerState.open
        self._opened_at = now
        self._trial_in_flight = False

    def _refresh(self, now: float) -> None:
        """Move an open circuit to half-open once its cooldown has elapsed."""
        if self._state is BreakerState.open and self._cooldown_remaining(now) == 0.0:
            self._state = BreakerState.half_open
            self._trial_in_flight = False
            logger.info("Circuit breaker half-open", failures=self._failures)

    @property
    def state(self) -> BreakerState:
        """Current state, accounting for an elapsed cooldown."""
        with self._lock:
            self._refresh(self._clock())
            return self._state

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failures

    def snapshot(self) -> dict[str, Any]:
        """State and failure counter as a JSON-friendly mapping."""
        with self._lock:
            self._refresh(self._clock())
            return {"state": self._state.value, "failure_count": self._failures}

    def guards(self, operation: str) -> bool:
        """Whether the named operation is executed through this breaker."""
        return operation in self.config.protected_operations

    def reset(self) -> None:
        """Force the breaker back to the closed state."""
        with self._lock:
            self._state = BreakerState.closed
            self._failures = 0
            self._opened_at = 0.0
            self._trial_in_flight = False

    def _admit(self) -> float | None:
        """Decide whether a call may run.

        Returns:
            None if admitted, otherwise seconds until a trial is possible.
        """
        with self._lock:
            now = self._clock()
            self._refresh(now)

            if self._state is BreakerState.closed:
                return None
            if self._state is BreakerState.half_open and not self._trial_in_flight:
                self._trial_in_flight = True
                return None
            if self._state is BreakerState.half_open:
                # Trial already in flight.
                return self.config.recovery_timeout
            return self._cooldown_remaining(now)

    def _release_trial(self) -> None:
        """Free the half-open trial slot without recording an outcome."""
        with self._lock:
            self._trial_in_flight = False

    def _record_success(self) -> None:
        with self._lock:
            if self._state is BreakerState.half_open:
                self._state = BreakerState.closed
                self._failures = 0
                self._trial_in_flight = False
                logger.info("Circuit breaker closed after successful trial")
            elif self._state is BreakerState.closed:
                self._failures = 0

    def _record_failure(self, error: Exception) -> None:
        with self._lock:
            now = self._clock()
            self._failures += 1
            if self._state is BreakerState.open:
                return
            if self._state is BreakerState.half_open:
                self._open(now)
                logger.warning("Circuit breaker re-opened after failed trial", error=str(error))
            elif self._failures >= self.config.failure_threshold:
                self._open(now)
                logger.warning(
                    "Circuit breaker opened",
                    failures=self._failures,
                    threshold=self.config.failure_threshold,
                    error=str(error),
                )

    def call(self, thunk: Callable[[], Any]) -> BreakerResult:
        """Run a zero-argument callable through the breaker.

        Args:
            thunk: Computation to execute.

        Returns:
            BreakerResult with the value, the failure, or the rejection.

        Raises:
            BaseException: Non-``Exception`` errors such as KeyboardInterrupt are
                re-raised after freeing the half-open trial slot.
        """
        retry_after = self._admit()
        if retry_after is not None:
            return BreakerResult(status=CallStatus.rejected, retry_after=retry_after)

        try:
            value = thunk()
        except Exception as e:
            self._record_failure(e)
            return BreakerResult(status=CallStatus.failed, error=e)
        except BaseException:
            self._release_trial()
            raise

        self._record_success()
        return BreakerResult(status=CallStatus.ok, value=value)


def build_circuit_breaker(
    failure_threshold: int,
    recovery_timeout: float,
    protected_operations: frozenset[str],
) -> CircuitBreaker:
    """Create a breaker from plain configuration values."""
    return CircuitBreaker(
        BreakerConfig(
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            protected_operations=protected_operations,
        )
    )
