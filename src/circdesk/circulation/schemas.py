"""Result types for circulation operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..db.schemas import Loan


class IssueError(str, Enum):
    """Reasons a book cannot be issued, in the order they are checked."""

    BOOK_NOT_FOUND = "book_not_found"
    MEMBER_NOT_FOUND = "member_not_found"
    ALREADY_ISSUED = "already_issued"


class ReturnError(str, Enum):
    """Reasons a book cannot be returned."""

    BOOK_NOT_FOUND = "book_not_found"
    NOT_ISSUED = "not_issued"


@dataclass
class IssueResult:
    """Result of issuing a book."""

    success: bool
    loan: Optional[Loan] = None
    error: Optional[IssueError] = None


@dataclass
class ReturnResult:
    """Result of returning a book.

    ``fine`` is only set when the book came back after its due date.
    """

    success: bool
    error: Optional[ReturnError] = None
    loan: Optional[Loan] = None
    overdue_days: int = 0
    fine: Optional[int] = None

    @property
    def is_overdue(self) -> bool:
        return self.overdue_days > 0
