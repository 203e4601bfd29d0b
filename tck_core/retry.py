"""
tck_core.retry
--------------
Retry helper for post-submission verification.

retry_on_error() re-runs a check while it raises ConsistencyMiss (the query
service has not caught up yet). Anything else propagates on first sight, and
once the attempt budget is spent the last miss propagates unchanged.
Only verification reads belong in here; submissions are never retried.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, Tuple, Type, TypeVar
import time

from .config import Settings
from .constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY
from .errors import ConsistencyMiss
from .logger import get_logger

log = get_logger("TCK.Retry")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    delay: float = DEFAULT_RETRY_DELAY
    backoff: float = 1.0  # 1.0 = fixed delay
    retry_on: Tuple[Type[BaseException], ...] = (ConsistencyMiss,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay < 0 or self.backoff < 1.0:
            raise ValueError("delay must be >= 0 and backoff >= 1.0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(max_attempts=settings.retry_max_attempts, delay=settings.retry_delay)

    def delay_for(self, attempt: int) -> float:
        """Sleep before attempt ``attempt + 1`` (attempts count from 1)."""
        return self.delay * (self.backoff ** (attempt - 1))


DEFAULT_POLICY = RetryPolicy()


def retry_on_error(
    check: Callable[[], T],
    *,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    deadline=None,
) -> T:
    policy = policy or DEFAULT_POLICY
    attempt = 1
    while True:
        try:
            return check()
        except policy.retry_on as e:
            if attempt >= policy.max_attempts:
                log.warning(f"[RETRY] giving up after {attempt} attempts: {e}")
                raise
            wait = policy.delay_for(attempt)
            log.info(f"[RETRY] attempt {attempt}/{policy.max_attempts} not yet consistent ({e}); sleeping {wait:.2f}s")
        if deadline is not None:
            deadline.check()
            wait = min(wait, deadline.remaining())
        sleep(wait)
        attempt += 1


def retrying(policy: Optional[RetryPolicy] = None, sleep: Callable[[float], None] = time.sleep, deadline=None):
    """Decorator form: the wrapped check is run through retry_on_error."""
    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @wraps(fn)
        def wrapper(*args, **kwargs) -> T:
            return retry_on_error(lambda: fn(*args, **kwargs), policy=policy, sleep=sleep, deadline=deadline)
        return wrapper
    return decorator
