from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a collaborator call: either its value, or a default plus the reason it was used."""

    value: T
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, default: T, error: str) -> "Outcome[T]":
        return cls(value=default, ok=False, error=error)

    @property
    def degraded(self) -> bool:
        return not self.ok
