"""
tck_core.context
----------------
Per-test-case state made explicit.

A TestContext carries the operator the case runs as and the wall-clock
deadline that bounds it. test_case() builds a fresh context, configures the
server with it and always resets the server afterwards, so nothing from one
case is visible to the next.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional
import time

from .config import Settings
from .errors import TestCaseTimeout
from .logger import get_logger
from .params import SetupParams

log = get_logger("TCK.Context")


class Deadline:
    """Wall-clock budget for one test case."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._start = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start

    def remaining(self) -> float:
        return max(0.0, self.seconds - self.elapsed)

    def expired(self) -> bool:
        return self.elapsed >= self.seconds

    def check(self) -> None:
        if self.expired():
            raise TestCaseTimeout(self.seconds, self.elapsed)


@dataclass
class TestContext:
    __test__ = False  # keep pytest from collecting it

    operator_account_id: Optional[str] = None
    operator_private_key: Optional[str] = field(default=None, repr=False)
    deadline: Optional[Deadline] = None
    node_ip: Optional[str] = None
    node_account_id: Optional[str] = None
    mirror_network_ip: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TestContext":
        return cls(
            operator_account_id=settings.operator_account_id,
            operator_private_key=settings.operator_private_key,
            deadline=Deadline(settings.test_timeout),
            node_ip=settings.node_ip,
            node_account_id=settings.node_account_id,
        )

    def setup_params(self) -> SetupParams:
        return SetupParams(
            operator_account_id=self.operator_account_id,
            operator_private_key=self.operator_private_key,
            node_ip=self.node_ip,
            node_account_id=self.node_account_id,
            mirror_network_ip=self.mirror_network_ip,
        )


@contextmanager
def test_case(client, settings: Optional[Settings] = None, context: Optional[TestContext] = None) -> Iterator:
    """Run one case: fresh context, ``setup`` with its operator, ``reset`` on exit.

    Yields a client bound to the case's context (``.context`` on it).
    """
    settings = settings or Settings.from_env()
    ctx = context or TestContext.from_settings(settings)
    case_client = client.with_context(ctx)
    # reset runs unbound so a spent case deadline does not block it
    cleanup = client.with_context(None)
    try:
        if ctx.operator_account_id:
            case_client.setup(ctx.setup_params())
        else:
            log.warning("[CASE] no operator configured; skipping setup")
        yield case_client
    except BaseException:
        # the case's own failure wins over a failing reset
        try:
            cleanup.reset()
        except Exception as e:
            log.error(f"[CASE] reset after failed case also failed: {e}")
        raise
    else:
        cleanup.reset()


test_case.__test__ = False
