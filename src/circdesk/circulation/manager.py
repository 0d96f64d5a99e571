"""Circulation manager for issuing and returning books."""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ..config import DEFAULT_FINE_PER_DAY, DEFAULT_LOAN_PERIOD_DAYS
from ..db.schemas import LibraryState, Loan
from .schemas import IssueError, IssueResult, ReturnError, ReturnResult

logger = logging.getLogger(__name__)


class CirculationManager:
    """Manages active loans and overdue fines."""

    def __init__(
        self,
        state: LibraryState,
        clock: Callable[[], date] = date.today,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
        fine_per_day: int = DEFAULT_FINE_PER_DAY,
    ):
        """Initialize circulation manager.

        Args:
            state: Library state holding books, members and loans
            clock: Returns the current date
            loan_period_days: Days from issue until a loan is due
            fine_per_day: Fine charged per whole day overdue

        Raises:
            ValueError: If the loan period is not positive or the fine is negative
        """
        if loan_period_days <= 0:
            raise ValueError(f"Loan period must be positive, got {loan_period_days}")
        if fine_per_day < 0:
            raise ValueError(f"Fine per day cannot be negative, got {fine_per_day}")

        self.state = state
        self.clock = clock
        self.loan_period = timedelta(days=loan_period_days)
        self.fine_per_day = fine_per_day

    def issue_book(self, book_id: int, member_id: int) -> IssueResult:
        """Issue a book to a member.

        Checks run in order: book exists, member exists, book not issued.
        The first failing check is reported.

        Args:
            book_id: Book to issue
            member_id: Member borrowing the book

        Returns:
            IssueResult holding the new loan on success
        """
        book = self.state.books.get(book_id)
        if book is None:
            return IssueResult(success=False, error=IssueError.BOOK_NOT_FOUND)
        if member_id not in self.state.members:
            return IssueResult(success=False, error=IssueError.MEMBER_NOT_FOUND)
        if book.issued:
            return IssueResult(success=False, error=IssueError.ALREADY_ISSUED)

        today = self.clock()
        loan = Loan(
            book_id=book_id,
            member_id=member_id,
            issue_date=today,
            due_date=today + self.loan_period,
        )
        book.issued = True
        self.state.loans.append(loan)

        return IssueResult(success=True, loan=loan)

    def return_book(self, book_id: int) -> ReturnResult:
        """Return an issued book, computing any overdue fine.

        Args:
            book_id: Book being returned

        Returns:
            ReturnResult with overdue days and fine (if any)
        """
        book = self.state.books.get(book_id)
        if book is None:
            return ReturnResult(success=False, error=ReturnError.BOOK_NOT_FOUND)
        if not book.issued:
            return ReturnResult(success=False, error=ReturnError.NOT_ISSUED)

        result = ReturnResult(success=True)
        loan = self._find_loan(book_id)
        if loan is not None:
            result.loan = loan
            result.overdue_days = loan.days_overdue(self.clock())
            if result.overdue_days > 0:
                result.fine = result.overdue_days * self.fine_per_day
            self.state.loans.remove(loan)
        else:
            logger.warning(
                "Book %d is marked issued but has no active loan; returning without a fine",
                book_id,
            )

        book.issued = False
        return result

    def list_active_loans(self) -> list[Loan]:
        """List active loans in the order they were issued.

        The list is a copy; issuing or returning later does not change it.
        """
        return list(self.state.loans)

    def list_overdue_loans(self) -> list[Loan]:
        """List active loans whose due date is before today."""
        today = self.clock()
        return [loan for loan in self.state.loans if loan.is_overdue(today)]

    def _find_loan(self, book_id: int) -> Optional[Loan]:
        for loan in self.state.loans:
            if loan.book_id == book_id:
                return loan
        return None
