from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SubmissionPhase(str, Enum):
    idle = "idle"
    validating = "validating"
    submitting = "submitting"
    succeeded = "succeeded"
    succeeded_with_warnings = "succeeded_with_warnings"
    queued_offline = "queued_offline"


@dataclass(frozen=True)
class SubmissionResult:
    # success is what the UI is told; remote_persisted is what actually happened
    success: bool
    outcome: SubmissionPhase
    message: str | None = None
    request_id: int | None = None
    remote_persisted: bool = False
    warning: str | None = None
