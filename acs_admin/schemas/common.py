from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class CommandFailed(RuntimeError):
    """Raised when a command envelope carries a non-zero code."""

    def __init__(self, message: str, *, code: int):
        super().__init__(message)
        self.code = code


class Envelope(BaseModel, Generic[T]):
    """Standard command envelope returned by the backend."""
    code: int
    msg: str = ""
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.code == 0

    def raise_for_code(self) -> "Envelope[T]":
        if not self.ok:
            raise CommandFailed(self.msg or "command_failed", code=self.code)
        return self


class Page(BaseModel, Generic[T]):
    """Paginated listing wrapper. Pagination bounds are trusted, not checked."""
    total_count: int = Field(0, ge=0)
    pos: int = Field(0, ge=0)
    data: List[T] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        # Listing endpoints send null for an empty page
        return [] if value is None else value


class TypeOption(BaseModel):
    id: str
    value: str


class IdName(BaseModel):
    id: int
    name: str = ""
