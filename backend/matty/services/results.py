"""Typed outcome of a Data Store call.

A store never raises into the feed controller. Instead every call reports
whether it succeeded with data, succeeded with nothing, or failed (and why),
so callers can tell "no events" from "the request did not go through".
"""
import enum
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultStatus(str, enum.Enum):
    success = "success"
    empty = "empty"
    failure = "failure"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    status: ResultStatus
    items: list[T] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def of(cls, items: list[T]) -> "StoreResult[T]":
        """Wrap fetched items, reporting ``empty`` when there are none."""
        items = list(items)
        return cls(ResultStatus.success if items else ResultStatus.empty, items)

    @classmethod
    def done(cls) -> "StoreResult[T]":
        """A mutation that went through."""
        return cls(ResultStatus.success)

    @classmethod
    def failed(cls, reason: str) -> "StoreResult[T]":
        return cls(ResultStatus.failure, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status != ResultStatus.failure
