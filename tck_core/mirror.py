# tck_core/mirror.py
"""
Read-only client for the query service (mirror node) used to verify what a
submission did. The service trails the ledger, so a 404 or a stale field is
reported as a ConsistencyMiss for retry_on_error to absorb.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

import requests

from . import codec
from .config import Settings
from .errors import EntityNotFound, FieldMismatch, QueryServiceError, TransportError
from .logger import get_logger
from .utils import b64d

log = get_logger("TCK.Mirror")

_UNSET = object()


def _seconds(value: Any) -> Optional[int]:
    # "1712345678.000000000" (seconds.nanos), a plain integer, or a JSON number
    if value is None:
        return None
    if isinstance(value, Decimal):
        value = int(value)
    if isinstance(value, str) and "." in value:
        value = value.split(".", 1)[0]
    return codec.decode_int64(value, allow_min=True)


@dataclass
class FileInfo:
    file_id: str
    memo: str = ""
    expiration_time: Optional[int] = None
    keys: List[Any] = field(default_factory=list)
    deleted: bool = False
    size: Optional[int] = None
    contents: Optional[bytes] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileInfo":
        return cls(
            file_id=str(data["file_id"]),
            memo=data.get("memo") or "",
            expiration_time=_seconds(data.get("expiration_time")),
            keys=list(data.get("keys") or []),
            deleted=bool(data.get("deleted", False)),
            size=data.get("size"),
            contents=b64d(data["contents"]) if data.get("contents") is not None else None,
        )


class MirrorNodeClient:
    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "MirrorNodeClient":
        return cls(settings.mirror_url, timeout=settings.rpc_timeout, session=session)

    def _get(self, path: str, entity: str, entity_id: str) -> Any:
        url = f"{self.base_url}/api/v1/{path}"
        log.debug(f"[MIRROR GET] {url}")
        try:
            res = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.error(f"[MIRROR GET] transport failure: {e}")
            raise TransportError(f"{url}: {e}") from e
        if res.status_code == 404:
            raise EntityNotFound(entity, entity_id)
        if not res.ok:
            raise QueryServiceError(res.status_code, res.text)
        return codec.loads(res.content)

    def get_file_info(self, file_id: str) -> FileInfo:
        return FileInfo.from_dict(self._get(f"files/{file_id}", "file", file_id))

    def get_file_contents(self, file_id: str) -> bytes:
        data = self._get(f"files/{file_id}/contents", "file", file_id)
        return b64d(data.get("contents") or "")

    def close(self) -> None:
        self._session.close()


def expect_file(
    client: MirrorNodeClient,
    file_id: str,
    *,
    memo: Any = _UNSET,
    expiration_time: Any = _UNSET,
    contents: Union[str, bytes, object] = _UNSET,
) -> FileInfo:
    """Fetch ``file_id`` and compare the given fields.

    Raises FieldMismatch on the first differing field, EntityNotFound when the
    file is not visible yet. Meant to be wrapped in retry_on_error().
    """
    info = client.get_file_info(file_id)
    if info.file_id != file_id:
        raise FieldMismatch("file_id", file_id, info.file_id)
    if memo is not _UNSET and info.memo != memo:
        raise FieldMismatch("memo", memo, info.memo)
    if expiration_time is not _UNSET:
        expected = codec.decode_int64(expiration_time)
        if info.expiration_time != expected:
            raise FieldMismatch("expiration_time", expected, info.expiration_time)
    if contents is not _UNSET:
        expected_bytes = contents.encode("utf-8") if isinstance(contents, str) else contents
        if info.contents is None:
            info = replace(info, contents=client.get_file_contents(file_id))
        if info.contents != expected_bytes:
            raise FieldMismatch("contents", expected_bytes, info.contents)
    return info
