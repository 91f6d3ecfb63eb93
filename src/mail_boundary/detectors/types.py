from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Sender:
    name: str = ""
    address: str = ""

    @property
    def is_identifiable(self) -> bool:
        return bool(self.name.strip() or self.address.strip())

    def as_dict(self) -> dict[str, str]:
        return {"name": self.name, "address": self.address}


@dataclass(frozen=True)
class EmbeddedEmail:
    sender: Sender
    body: str
    date: str | None = None
    subject: str | None = None
    to: str | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"from": self.sender.as_dict(), "body": self.body}
        for key in ("date", "subject", "to"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one detector (or of the registry) over one block of text.

    `message` holds the normalized text that precedes the embedded mail and is
    None when the boundary sits on the first line. `detector` is only ever set
    by the registry on the winning result.
    """

    found: bool
    confidence: Confidence = Confidence.LOW
    email: EmbeddedEmail | None = None
    message: str | None = None
    detector: str | None = None

    def __post_init__(self) -> None:
        if self.found and self.email is None:
            raise ValueError("a found DetectionResult must carry an email")

    @classmethod
    def not_found(cls) -> "DetectionResult":
        return cls(found=False, confidence=Confidence.LOW)

    @property
    def is_usable(self) -> bool:
        return self.found and self.email is not None and self.email.sender.is_identifiable

    @property
    def match_index(self) -> int:
        return len(self.message) if self.message else 0

    def with_detector(self, name: str) -> "DetectionResult":
        return replace(self, detector=name)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"found": self.found, "confidence": self.confidence.value}
        if self.detector is not None:
            payload["detector"] = self.detector
        if self.email is not None:
            payload["email"] = self.email.as_dict()
        if self.message is not None:
            payload["message"] = self.message
        return payload


@runtime_checkable
class ForwardDetector(Protocol):
    """Capability set every boundary detector exposes to the registry."""

    @property
    def name(self) -> str: ...

    @property
    def priority(self) -> int: ...

    def detect(self, text: str) -> DetectionResult: ...
