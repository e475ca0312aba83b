"""
Tagged result type for best-effort pipeline stages.

A stage never raises for a degradable failure; it returns a StageResult
and the orchestrator branches on the tag.

Dependencies: pydantic
System role: Explicit success/partial/failure values between stages
"""

import enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class StageStatus(str, enum.Enum):
    """
    Outcome of a pipeline stage.

    SUCCESS: Full output produced
    PARTIAL: Output produced with gaps (e.g. some embedding batches failed)
    FAILURE: No usable output; value holds the stage's empty substitute
    SKIPPED: Stage not run (nothing to do)
    """

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"
    SKIPPED = "skipped"


class StageResult(BaseModel, Generic[T]):
    """Value of a stage together with its outcome tag."""

    status: StageStatus
    value: T
    error: str | None = Field(default=None, description="Failure reason when not SUCCESS")

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(status=StageStatus.SUCCESS, value=value)

    @classmethod
    def partial(cls, value: T, error: str | None = None) -> "StageResult[T]":
        return cls(status=StageStatus.PARTIAL, value=value, error=error)

    @classmethod
    def failure(cls, value: T, error: str) -> "StageResult[T]":
        return cls(status=StageStatus.FAILURE, value=value, error=error)

    @classmethod
    def skipped(cls, value: T) -> "StageResult[T]":
        return cls(status=StageStatus.SKIPPED, value=value)

    @property
    def ok(self) -> bool:
        """True unless the stage failed outright."""
        return self.status != StageStatus.FAILURE
