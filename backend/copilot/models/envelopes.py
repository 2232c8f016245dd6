"""
envelopes.py
============
Provenance-tagged wrappers around analyzer output.

Each variant is its own type so callers can match on it instead of
comparing source strings. Only the orchestrators build these.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional, Union

from pydantic import BaseModel

FALLBACK_NOTE = "AI analysis unavailable"
AUTH_UNAVAILABLE_NOTE = "AI analysis unavailable for auth validation"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class _Envelope:
    data: BaseModel

    source: ClassVar[str]

    def to_dict(self) -> Dict[str, Any]:
        """Envelope fields first, then the payload fields flattened alongside."""
        body: Dict[str, Any] = {"source": self.source}
        note: Optional[str] = getattr(self, "note", None)
        if note:
            body["note"] = note
        body["timestamp"] = self.timestamp
        body.update(self.data.model_dump(mode="json", by_alias=True, exclude_none=True))
        return body


@dataclass(frozen=True)
class AIPowered(_Envelope):
    timestamp: str = field(default_factory=utc_timestamp)

    source: ClassVar[str] = "ai-powered"


@dataclass(frozen=True)
class RuleBasedFallback(_Envelope):
    note: str = FALLBACK_NOTE
    timestamp: str = field(default_factory=utc_timestamp)

    source: ClassVar[str] = "rule-based-fallback"


@dataclass(frozen=True)
class RuleBasedOnly(_Envelope):
    note: str = AUTH_UNAVAILABLE_NOTE
    timestamp: str = field(default_factory=utc_timestamp)

    source: ClassVar[str] = "rule-based-only"


ResultEnvelope = Union[AIPowered, RuleBasedFallback, RuleBasedOnly]
