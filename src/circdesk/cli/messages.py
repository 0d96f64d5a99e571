"""User-facing text for operation results.

The core returns result objects with error kinds; this module turns them
into the sentences shown to the librarian.
"""

from ..circulation.schemas import IssueError, IssueResult, ReturnError, ReturnResult
from ..db.schemas import AddError, AddResult

CURRENCY = "₹"

ISSUE_ERRORS = {
    IssueError.BOOK_NOT_FOUND: "Book not found.",
    IssueError.MEMBER_NOT_FOUND: "Member not found.",
    IssueError.ALREADY_ISSUED: "Book is already issued.",
}

RETURN_ERRORS = {
    ReturnError.BOOK_NOT_FOUND: "Book not found.",
    ReturnError.NOT_ISSUED: "Book is not currently issued.",
}


def add_message(result: AddResult, kind: str) -> str:
    """Describe the result of adding a book or member.

    Args:
        result: Result from add_book / add_member
        kind: "Book" or "Member"
    """
    if result.success:
        return f"{kind} added successfully!"
    if result.error == AddError.DUPLICATE_ID:
        return f"{kind} with this ID already exists."
    return f"Could not add {kind.lower()}."


def issue_message(result: IssueResult) -> str:
    if result.success:
        return "Book issued successfully."
    return ISSUE_ERRORS.get(result.error, "Could not issue book.")


def return_messages(result: ReturnResult) -> list[str]:
    """Describe a return, fine notice first when the book was overdue."""
    if not result.success:
        return [RETURN_ERRORS.get(result.error, "Could not return book.")]

    lines = []
    if result.fine is not None:
        lines.append(fine_message(result.overdue_days, result.fine))
    lines.append("Book returned successfully.")
    return lines


def fine_message(overdue_days: int, fine: int) -> str:
    day_word = "day" if overdue_days == 1 else "days"
    return f"Book is overdue by {overdue_days} {day_word}. Fine to be paid: {CURRENCY}{fine}"
