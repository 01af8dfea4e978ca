"""Pydantic value types for interests."""
from __future__ import annotations
from pydantic import BaseModel


class Interest(BaseModel):
    """A named tag used to categorise events and to search for them.

    Two interests are the same interest when their names match; the emoji is
    decoration only.
    """

    name: str
    emoji: str = ""

    model_config = {"frozen": True}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interest):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}".strip()


class SelectableInterest(BaseModel):
    """Interest-picker entry."""

    interest: Interest
    selected: bool = False

    model_config = {"frozen": True}

    def toggle(self) -> SelectableInterest:
        return self.model_copy(update={"selected": not self.selected})
