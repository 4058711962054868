from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompressionResult:
    encoded_payload: str  # data URI
    estimated_size_bytes: int
    media_type: str
    width: int | None = None
    height: int | None = None
    quality: int | None = None  # None for documents passed through untouched


@dataclass(frozen=True)
class SubmissionOutcome:
    success: bool
    message: str | None = None
    kind: str | None = None  # "transport" | "application" on failure

    @classmethod
    def succeeded(cls) -> "SubmissionOutcome":
        return cls(success=True)

    @classmethod
    def failed(cls, message: str, kind: str) -> "SubmissionOutcome":
        return cls(success=False, message=message, kind=kind)
