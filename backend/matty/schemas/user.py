"""Pydantic value type for users."""
from pydantic import BaseModel


class User(BaseModel):
    id: str
    name: str

    model_config = {"frozen": True}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
