"""
tck_core.errors
---------------
Error taxonomy for the harness.

- TransportError: the channel to the server-under-test failed (fatal)
- JsonRpcError and subclasses: the server answered with an error envelope
- ConsistencyMiss and subclasses: the query service does not reflect a
  submitted change yet (the only family the retry helper absorbs)
- KeySpecError / Int64RangeError / ParamsError: caller misuse, raised at
  construction time
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Type

from .constants import (
    PARSE_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, INVALID_PARAMS,
    INTERNAL_ERROR,
)


class TckError(Exception):
    pass


class TransportError(TckError):
    pass


class TestCaseTimeout(TckError):
    __test__ = False  # keep pytest from collecting it

    def __init__(self, budget: float, elapsed: float):
        super().__init__(f"test case exceeded {budget:.1f}s (elapsed {elapsed:.1f}s)")
        self.budget = budget
        self.elapsed = elapsed


# --------- JSON-RPC error envelopes ----------
class JsonRpcError(TckError):
    kind = "internal-error"

    def __init__(self, code: int, message: str, data: Any = None, method: Optional[str] = None):
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.data = data
        self.method = method

    @property
    def status(self) -> Optional[str]:
        """Domain status string carried in ``data.status``, verbatim."""
        if isinstance(self.data, dict):
            return self.data.get("status")
        return None

    def __str__(self) -> str:
        s = f"{self.method or 'rpc'}: [{self.code}] {self.message}"
        if self.status:
            s += f" (status={self.status})"
        return s


class MalformedRequestError(JsonRpcError):
    kind = "malformed-request"


class MalformedResponseError(MalformedRequestError):
    pass


class MethodNotFoundError(JsonRpcError):
    kind = "method-not-found"


class InvalidParamsError(JsonRpcError):
    kind = "invalid-params"


class InternalError(JsonRpcError):
    kind = "internal-error"


_BY_CODE: Dict[int, Type[JsonRpcError]] = {
    PARSE_ERROR: MalformedRequestError,
    INVALID_REQUEST: MalformedRequestError,
    METHOD_NOT_FOUND: MethodNotFoundError,
    INVALID_PARAMS: InvalidParamsError,
    INTERNAL_ERROR: InternalError,
}


def classify(code: int) -> Type[JsonRpcError]:
    # server-defined range (-32099..-32000) and unknown codes land in internal-error;
    # the raw code stays on the instance
    return _BY_CODE.get(code, InternalError)


def from_envelope(error: Dict[str, Any], method: Optional[str] = None) -> JsonRpcError:
    """Build the typed error for a JSON-RPC ``error`` member."""
    try:
        code = int(error["code"])
    except (KeyError, TypeError, ValueError):
        return MalformedResponseError(INVALID_REQUEST, f"error envelope without integer code: {error!r}", method=method)
    cls = classify(code)
    return cls(code, str(error.get("message", "")), error.get("data"), method=method)


# --------- Eventual consistency ----------
class ConsistencyMiss(TckError):
    """The query service does not (yet) reflect the expected state."""


class EntityNotFound(ConsistencyMiss):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class FieldMismatch(ConsistencyMiss):
    def __init__(self, field: str, expected: Any, actual: Any):
        super().__init__(f"{field}: expected {expected!r}, got {actual!r}")
        self.field = field
        self.expected = expected
        self.actual = actual


class QueryServiceError(TckError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"query service returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


# --------- Caller misuse ----------
class KeySpecError(ValueError):
    pass


class Int64RangeError(ValueError):
    pass


class ParamsError(ValueError):
    pass
