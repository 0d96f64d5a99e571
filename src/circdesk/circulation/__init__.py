"""Book circulation module.

Provides functionality for:
- Issuing books to members
- Returning books and computing overdue fines
- Listing active and overdue loans
"""

from .manager import CirculationManager
from .schemas import IssueError, IssueResult, ReturnError, ReturnResult

__all__ = [
    "CirculationManager",
    "IssueError",
    "IssueResult",
    "ReturnError",
    "ReturnResult",
]
