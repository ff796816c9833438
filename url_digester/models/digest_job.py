"""Job and result records exchanged between the dispatcher and its workers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from url_digester.core.errors import DigestError

FAILED_PREFIX = "failed: "


@dataclass(frozen=True)
class DigestJob:
    """One URL awaiting fetch, tagged with its position in the input."""

    index: int
    url: str


@dataclass(frozen=True)
class DigestResult:
    """Outcome of one fetch attempt for a job."""

    index: int
    url: str
    started_at: datetime
    finished_at: datetime
    checksum: str = ""
    error: DigestError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def render(self) -> str:
        """Value stored in the output mapping: the digest or ``failed: <message>``."""
        if self.error is not None:
            return f"{FAILED_PREFIX}{self.error}"
        return self.checksum
