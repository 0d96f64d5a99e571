"""Tests for CirculationManager."""

from datetime import date, timedelta

import pytest

from circdesk.circulation import CirculationManager, IssueError, ReturnError
from circdesk.db.schemas import Loan


pytestmark = pytest.mark.usefixtures("stocked")


class TestIssueBook:
    """Tests for issuing books."""

    def test_issue_book(self, circulation, catalog, clock):
        """Test issuing creates a loan due in 14 days."""
        result = circulation.issue_book(1, 9)

        assert result.success
        assert result.error is None
        assert catalog.find_book(1).issued is True

        loan = result.loan
        assert loan.book_id == 1
        assert loan.member_id == 9
        assert loan.issue_date == clock.today
        assert loan.due_date == clock.today + timedelta(days=14)
        assert circulation.list_active_loans() == [loan]

    def test_book_not_found(self, circulation):
        result = circulation.issue_book(99, 9)

        assert not result.success
        assert result.error == IssueError.BOOK_NOT_FOUND
        assert result.loan is None

    def test_member_not_found(self, circulation, catalog):
        result = circulation.issue_book(1, 99)

        assert not result.success
        assert result.error == IssueError.MEMBER_NOT_FOUND
        assert catalog.find_book(1).issued is False

    def test_book_checked_before_member(self, circulation):
        """Test a missing book is reported even when the member is missing too."""
        result = circulation.issue_book(99, 99)

        assert result.error == IssueError.BOOK_NOT_FOUND

    def test_member_checked_before_issued_state(self, circulation):
        """Test a missing member is reported before an already-issued book."""
        circulation.issue_book(1, 9)

        result = circulation.issue_book(1, 99)

        assert result.error == IssueError.MEMBER_NOT_FOUND

    def test_already_issued(self, circulation):
        """Test issuing an issued book fails and keeps one loan."""
        circulation.issue_book(1, 9)

        result = circulation.issue_book(1, 10)

        assert not result.success
        assert result.error == IssueError.ALREADY_ISSUED
        assert len(circulation.list_active_loans()) == 1
        assert circulation.list_active_loans()[0].member_id == 9

    def test_member_can_hold_several_books(self, circulation):
        assert circulation.issue_book(1, 9).success
        assert circulation.issue_book(2, 9).success

        assert [l.book_id for l in circulation.list_active_loans()] == [1, 2]

    def test_custom_loan_period(self, state, clock):
        """Test the loan period is configurable."""
        manager = CirculationManager(state, clock=clock, loan_period_days=7)

        loan = manager.issue_book(1, 9).loan

        assert loan.due_date == clock.today + timedelta(days=7)


class TestReturnBook:
    """Tests for returning books."""

    def test_return_on_due_date_has_no_fine(self, circulation, catalog, clock):
        """Test returning exactly on the due date."""
        circulation.issue_book(1, 9)
        clock.advance(14)

        result = circulation.return_book(1)

        assert result.success
        assert result.fine is None
        assert result.overdue_days == 0
        assert not result.is_overdue
        assert catalog.find_book(1).issued is False
        assert circulation.list_active_loans() == []

    def test_return_early_has_no_fine(self, circulation, clock):
        circulation.issue_book(1, 9)
        clock.advance(3)

        result = circulation.return_book(1)

        assert result.success
        assert result.fine is None

    def test_return_overdue(self, circulation, catalog, clock):
        """Test returning 20 days after issue charges 6 days."""
        circulation.issue_book(1, 9)
        clock.advance(20)

        result = circulation.return_book(1)

        assert result.success
        assert result.overdue_days == 6
        assert result.fine == 6
        assert result.is_overdue
        assert catalog.find_book(1).issued is False

    @pytest.mark.parametrize("days_late", [1, 2, 30, 365])
    def test_fine_is_one_per_day(self, circulation, clock, days_late):
        circulation.issue_book(1, 9)
        clock.advance(14 + days_late)

        assert circulation.return_book(1).fine == days_late

    def test_custom_fine_rate(self, state, clock):
        manager = CirculationManager(state, clock=clock, fine_per_day=5)
        manager.issue_book(1, 9)
        clock.advance(17)

        assert manager.return_book(1).fine == 15

    def test_return_reports_loan(self, circulation):
        loan = circulation.issue_book(1, 9).loan

        result = circulation.return_book(1)

        assert result.loan == loan

    def test_book_not_found(self, circulation):
        result = circulation.return_book(99)

        assert not result.success
        assert result.error == ReturnError.BOOK_NOT_FOUND

    def test_not_issued(self, circulation):
        result = circulation.return_book(1)

        assert not result.success
        assert result.error == ReturnError.NOT_ISSUED

    def test_return_twice(self, circulation):
        circulation.issue_book(1, 9)
        circulation.return_book(1)

        result = circulation.return_book(1)

        assert result.error == ReturnError.NOT_ISSUED

    def test_return_only_removes_that_loan(self, circulation):
        circulation.issue_book(1, 9)
        circulation.issue_book(2, 10)
        circulation.issue_book(3, 9)

        circulation.return_book(2)

        assert [l.book_id for l in circulation.list_active_loans()] == [1, 3]

    def test_reissue_after_return(self, circulation, clock):
        """Test a returned book can be issued again with fresh dates."""
        circulation.issue_book(1, 9)
        clock.advance(5)
        circulation.return_book(1)

        result = circulation.issue_book(1, 10)

        assert result.success
        assert result.loan.issue_date == clock.today

    def test_issued_book_without_loan(self, circulation, catalog, state, caplog):
        """Test an issued book with no loan record is still returned."""
        state.books[1].issued = True

        result = circulation.return_book(1)

        assert result.success
        assert result.fine is None
        assert result.loan is None
        assert catalog.find_book(1).issued is False
        assert "no active loan" in caplog.text


class TestLoanQueries:
    """Tests for listing active and overdue loans."""

    def test_active_loans_in_issue_order(self, circulation):
        circulation.issue_book(3, 9)
        circulation.issue_book(1, 10)

        assert [l.book_id for l in circulation.list_active_loans()] == [3, 1]

    def test_active_loans_is_snapshot(self, circulation):
        circulation.issue_book(1, 9)
        loans = circulation.list_active_loans()

        circulation.issue_book(2, 9)

        assert len(loans) == 1

    def test_no_overdue_loans(self, circulation, clock):
        circulation.issue_book(1, 9)
        clock.advance(14)

        assert circulation.list_overdue_loans() == []

    def test_overdue_loans(self, circulation, clock):
        """Test only loans past their due date are listed."""
        circulation.issue_book(1, 9)
        clock.advance(5)
        circulation.issue_book(2, 10)
        clock.advance(10)  # book 1 is one day late, book 2 is not
        circulation.issue_book(3, 9)

        overdue = circulation.list_overdue_loans()

        assert [l.book_id for l in overdue] == [1]

    def test_overdue_preserves_active_order(self, state, clock):
        state.loans.extend(
            [
                Loan(book_id=3, member_id=9, issue_date=date(2025, 1, 1), due_date=date(2025, 1, 15)),
                Loan(book_id=1, member_id=9, issue_date=date(2025, 2, 1), due_date=date(2025, 4, 1)),
                Loan(book_id=2, member_id=10, issue_date=date(2024, 12, 1), due_date=date(2024, 12, 15)),
            ]
        )
        manager = CirculationManager(state, clock=clock)

        assert [l.book_id for l in manager.list_overdue_loans()] == [3, 2]


class TestPolicy:
    """Tests for loan period and fine validation."""

    @pytest.mark.parametrize("days", [0, -1])
    def test_loan_period_must_be_positive(self, state, clock, days):
        with pytest.raises(ValueError, match="Loan period must be positive"):
            CirculationManager(state, clock=clock, loan_period_days=days)

    def test_negative_fine_rejected(self, state, clock):
        with pytest.raises(ValueError, match="Fine per day cannot be negative"):
            CirculationManager(state, clock=clock, fine_per_day=-1)

    def test_zero_fine_allowed(self, state, clock):
        manager = CirculationManager(state, clock=clock, fine_per_day=0)
        manager.issue_book(1, 9)
        clock.advance(20)

        result = manager.return_book(1)

        assert result.overdue_days == 6
        assert result.fine == 0
