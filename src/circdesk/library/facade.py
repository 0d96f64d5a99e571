"""Single entry point over catalog, membership, circulation and storage.

The Library owns one LibraryState for its lifetime. The state is loaded
once when the library is opened and written back only when the caller
asks for it with ``save()``, normally once at shutdown.
"""

from datetime import date
from typing import Callable, Optional

from ..catalog import CatalogManager
from ..circulation import CirculationManager, IssueResult, ReturnResult
from ..config import DEFAULT_FINE_PER_DAY, DEFAULT_LOAN_PERIOD_DAYS, Config, get_config
from ..db.schemas import AddResult, Book, LibraryState, Loan, Member
from ..db.store import LibraryStore, LoadResult, SaveResult
from ..membership import MembershipManager


class Library:
    """Library operations over one shared state."""

    def __init__(
        self,
        store: LibraryStore,
        state: Optional[LibraryState] = None,
        clock: Callable[[], date] = date.today,
        loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS,
        fine_per_day: int = DEFAULT_FINE_PER_DAY,
    ):
        """Initialize the library.

        Args:
            store: Where the state is loaded from and saved to
            state: Initial state (default: empty, until ``load()``)
            clock: Returns the current date
            loan_period_days: Days from issue until a loan is due
            fine_per_day: Fine charged per whole day overdue
        """
        self.store = store
        self.clock = clock
        self.loan_period_days = loan_period_days
        self.fine_per_day = fine_per_day
        self.load_result: Optional[LoadResult] = None
        self._bind(state if state is not None else LibraryState())

    @classmethod
    def open(
        cls,
        config: Optional[Config] = None,
        clock: Callable[[], date] = date.today,
    ) -> "Library":
        """Create a library from configuration and load its stored state."""
        config = config or get_config()
        library = cls(
            LibraryStore(config.data_path, keep_corrupt=config.keep_corrupt),
            clock=clock,
            loan_period_days=config.loan_period_days,
            fine_per_day=config.fine_per_day,
        )
        library.load()
        return library

    def _bind(self, state: LibraryState) -> None:
        self.state = state
        self.catalog = CatalogManager(state)
        self.membership = MembershipManager(state)
        self.circulation = CirculationManager(
            state,
            clock=self.clock,
            loan_period_days=self.loan_period_days,
            fine_per_day=self.fine_per_day,
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> LibraryState:
        """Replace the current state with the stored one.

        Never fails; see ``load_result`` for what happened.
        """
        self.load_result = self.store.load()
        self._bind(self.load_result.state)
        return self.state

    def save(self) -> SaveResult:
        """Write the current state to the store."""
        return self.store.save(self.state)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def add_book(self, book_id: int, title: str, author: str) -> AddResult:
        return self.catalog.add_book(book_id, title, author)

    def find_book(self, book_id: int) -> Optional[Book]:
        return self.catalog.find_book(book_id)

    def list_books(self) -> list[Book]:
        return self.catalog.list_books()

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def add_member(self, member_id: int, name: str) -> AddResult:
        return self.membership.add_member(member_id, name)

    def find_member(self, member_id: int) -> Optional[Member]:
        return self.membership.find_member(member_id)

    def list_members(self) -> list[Member]:
        return self.membership.list_members()

    # -------------------------------------------------------------------------
    # Circulation
    # -------------------------------------------------------------------------

    def issue_book(self, book_id: int, member_id: int) -> IssueResult:
        return self.circulation.issue_book(book_id, member_id)

    def return_book(self, book_id: int) -> ReturnResult:
        return self.circulation.return_book(book_id)

    def list_active_loans(self) -> list[Loan]:
        return self.circulation.list_active_loans()

    def list_overdue_loans(self) -> list[Loan]:
        return self.circulation.list_overdue_loans()
