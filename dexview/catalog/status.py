"""Fetch status shared by the list and detail fetchers."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from typing_extensions import Literal

StatusKind = Literal["idle", "loading", "success", "failed"]


class FetchStatus(BaseModel):
    """Tagged status of one fetcher.

    ``payload`` is only set for ``success`` and ``message`` only for
    ``failed``.  Use the class constructors rather than building instances
    by hand so the two never mix.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: StatusKind = "idle"
    payload: Optional[Any] = None
    message: Optional[str] = None
    http_status: Optional[int] = None

    @classmethod
    def idle(cls) -> "FetchStatus":
        return cls(kind="idle")

    @classmethod
    def loading(cls) -> "FetchStatus":
        return cls(kind="loading")

    @classmethod
    def success(cls, payload: Any) -> "FetchStatus":
        return cls(kind="success", payload=payload)

    @classmethod
    def failed(cls, message: str, http_status: Optional[int] = None) -> "FetchStatus":
        return cls(kind="failed", message=message, http_status=http_status)

    @property
    def is_idle(self) -> bool:
        return self.kind == "idle"

    @property
    def is_loading(self) -> bool:
        return self.kind == "loading"

    @property
    def is_success(self) -> bool:
        return self.kind == "success"

    @property
    def is_failed(self) -> bool:
        return self.kind == "failed"
