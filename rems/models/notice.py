"""User-visible outcome of an action (dismissible notification)."""

from typing import Literal
from pydantic import BaseModel


class Notice(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"

    @classmethod
    def success(cls, description: str) -> "Notice":
        return cls(title="Success", description=description)

    @classmethod
    def error(cls, description: str) -> "Notice":
        return cls(title="Error", description=description, variant="destructive")

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"
