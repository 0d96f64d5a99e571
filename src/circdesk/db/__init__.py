"""Entity model and local SQLite storage."""

from .models import BookRecord, LoanRecord, MemberRecord, StoreMeta
from .schemas import AddError, AddResult, Book, LibraryState, Loan, Member
from .store import (
    FORMAT_VERSION,
    LibraryStore,
    LoadResult,
    LoadStatus,
    SaveResult,
)

__all__ = [
    "Book",
    "Member",
    "Loan",
    "LibraryState",
    "AddError",
    "AddResult",
    "BookRecord",
    "MemberRecord",
    "LoanRecord",
    "StoreMeta",
    "FORMAT_VERSION",
    "LibraryStore",
    "LoadResult",
    "LoadStatus",
    "SaveResult",
]
