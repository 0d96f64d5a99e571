"""Pydantic schemas for the library's entity model.

These are the in-memory records the managers operate on. The persisted
form lives in ``models.py`` and is only touched by the store.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Book(BaseModel):
    """A catalogued book and its lending status."""

    id: int = Field(..., frozen=True)
    title: str
    author: str
    issued: bool = False

    @property
    def status(self) -> str:
        """Human-readable lending status."""
        return "Issued" if self.issued else "Available"


class Member(BaseModel):
    """A registered library member."""

    id: int = Field(..., frozen=True)
    name: str


class Loan(BaseModel):
    """An active loan of one book to one member.

    The due date is fixed when the loan is created and never recomputed.
    """

    model_config = {"frozen": True}

    book_id: int
    member_id: int
    issue_date: date
    due_date: date

    @field_validator("due_date")
    @classmethod
    def due_not_before_issue(cls, v, info):
        """Validate due date is not before issue date."""
        if "issue_date" in info.data and v < info.data["issue_date"]:
            raise ValueError("due_date must not be before issue_date")
        return v

    def days_overdue(self, today: date) -> int:
        """Whole days past the due date (0 if not overdue)."""
        return max(0, (today - self.due_date).days)

    def is_overdue(self, today: date) -> bool:
        """Check if loan is overdue on the given day."""
        return self.due_date < today


class LibraryState(BaseModel):
    """The aggregate of books, members and active loans.

    Persisted and restored as one unit. Books and members are keyed by id
    and keep insertion order; loans keep the order they were issued in.
    """

    books: dict[int, Book] = Field(default_factory=dict)
    members: dict[int, Member] = Field(default_factory=dict)
    loans: list[Loan] = Field(default_factory=list)


class AddError(str, Enum):
    """Reasons an add operation can fail."""

    DUPLICATE_ID = "duplicate_id"


@dataclass
class AddResult:
    """Result of adding a book or member."""

    success: bool
    error: Optional[AddError] = None
