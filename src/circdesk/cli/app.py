"""Command-line interface for circdesk.

Built with Typer for commands and Rich for output. Every command opens
the library (loading the data file), runs one operation, and saves the
data file again if the operation changed anything.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Generator

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import get_config
from ..db.schemas import Book, Loan, Member
from ..library import Library
from .messages import add_message, issue_message, return_messages

# Create the main app
app = typer.Typer(
    name="circdesk",
    help="Manage a small library's books, members and loans.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
book_app = typer.Typer(help="Add and look up books.", no_args_is_help=True)
app.add_typer(book_app, name="book")

member_app = typer.Typer(help="Add and look up members.", no_args_is_help=True)
app.add_typer(member_app, name="member")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


@contextmanager
def open_library() -> Generator[Library, None, None]:
    """Open the configured library and report any load problem."""
    config = get_config()
    library = Library.open(config)

    result = library.load_result
    if result is not None and not result.success:
        print_warning(
            f"Could not read {config.data_path} ({result.status.value}): {escape(result.error or '')}"
        )
        print_info("Starting with an empty library.")
        if result.quarantined_path:
            print_info(f"Unreadable file kept at {result.quarantined_path}")

    yield library


def save_library(library: Library) -> None:
    """Save the library, exiting with an error if the write fails."""
    result = library.save()
    if not result.success:
        print_error(f"Could not save library data: {escape(result.error or '')}")
        raise typer.Exit(1)


def require_text(value: str, message: str) -> str:
    """Reject blank text input."""
    value = value.strip()
    if not value:
        print_error(message)
        raise typer.Exit(1)
    return value


def format_book_table(books: list[Book], title: str = "Books") -> Table:
    """Create a rich table for displaying books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Status", style="yellow")

    for book in books:
        colour = "red" if book.issued else "green"
        table.add_row(
            str(book.id),
            escape(book.title),
            escape(book.author),
            f"[{colour}]{book.status}[/{colour}]",
        )

    return table


def format_member_table(members: list[Member], title: str = "Members") -> Table:
    """Create a rich table for displaying members."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")

    for member in members:
        table.add_row(str(member.id), escape(member.name))

    return table


def format_loan_table(
    library: Library,
    loans: list[Loan],
    today: date,
    title: str = "Loans",
) -> Table:
    """Create a rich table for displaying loans."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Book ID", justify="right", style="dim")
    table.add_column("Title", style="cyan", max_width=30)
    table.add_column("Member")
    table.add_column("Issued")
    table.add_column("Due")
    table.add_column("Status")

    for loan in loans:
        book = library.find_book(loan.book_id)
        member = library.find_member(loan.member_id)

        if loan.is_overdue(today):
            status = f"[bold red]OVERDUE ({loan.days_overdue(today)}d)[/bold red]"
        else:
            status = f"[green]due in {(loan.due_date - today).days}d[/green]"

        table.add_row(
            str(loan.book_id),
            escape(book.title) if book else "Unknown",
            escape(member.name) if member else f"#{loan.member_id}",
            loan.issue_date.isoformat(),
            loan.due_date.isoformat(),
            status,
        )

    return table


@app.callback()
def setup() -> None:
    """Manage a small library's books, members and loans."""
    try:
        config = get_config()
    except ValueError as e:
        print_error(escape(str(e)))
        raise typer.Exit(1)

    errors = config.validate()
    if errors:
        for error in errors:
            print_error(escape(error))
        raise typer.Exit(1)

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Book Commands
# ============================================================================


@book_app.command("add")
def book_add(
    book_id: int = typer.Argument(..., help="Unique book ID"),
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Book author"),
) -> None:
    """Add a book to the catalog."""
    title = require_text(title, "Title and Author cannot be empty.")
    author = require_text(author, "Title and Author cannot be empty.")

    with open_library() as library:
        result = library.add_book(book_id, title, author)
        if not result.success:
            print_error(add_message(result, "Book"))
            raise typer.Exit(1)
        save_library(library)

    print_success(add_message(result, "Book"))


@book_app.command("list")
def book_list() -> None:
    """List all books."""
    with open_library() as library:
        books = library.list_books()

    if not books:
        console.print("[dim]No books in the catalog[/dim]")
        return

    console.print(format_book_table(books))


@book_app.command("show")
def book_show(
    book_id: int = typer.Argument(..., help="Book ID"),
) -> None:
    """Show a single book."""
    with open_library() as library:
        book = library.find_book(book_id)

    if book is None:
        print_error("Book not found.")
        raise typer.Exit(1)

    console.print(format_book_table([book], title=f"Book {book.id}"))


# ============================================================================
# Member Commands
# ============================================================================


@member_app.command("add")
def member_add(
    member_id: int = typer.Argument(..., help="Unique member ID"),
    name: str = typer.Argument(..., help="Member name"),
) -> None:
    """Register a new member."""
    name = require_text(name, "Name cannot be empty.")

    with open_library() as library:
        result = library.add_member(member_id, name)
        if not result.success:
            print_error(add_message(result, "Member"))
            raise typer.Exit(1)
        save_library(library)

    print_success(add_message(result, "Member"))


@member_app.command("list")
def member_list() -> None:
    """List all members."""
    with open_library() as library:
        members = library.list_members()

    if not members:
        console.print("[dim]No members registered[/dim]")
        return

    console.print(format_member_table(members))


@member_app.command("show")
def member_show(
    member_id: int = typer.Argument(..., help="Member ID"),
) -> None:
    """Show a single member."""
    with open_library() as library:
        member = library.find_member(member_id)

    if member is None:
        print_error("Member not found.")
        raise typer.Exit(1)

    console.print(format_member_table([member], title=f"Member {member.id}"))


# ============================================================================
# Circulation Commands
# ============================================================================


@app.command("issue")
def issue(
    book_id: int = typer.Argument(..., help="Book ID to issue"),
    member_id: int = typer.Argument(..., help="Member borrowing the book"),
) -> None:
    """Issue a book to a member."""
    with open_library() as library:
        result = library.issue_book(book_id, member_id)
        if not result.success:
            print_error(issue_message(result))
            raise typer.Exit(1)
        save_library(library)

    print_success(issue_message(result))
    print_info(f"Due: {result.loan.due_date.isoformat()}")


@app.command("return")
def return_book(
    book_id: int = typer.Argument(..., help="Book ID being returned"),
) -> None:
    """Return an issued book and report any fine."""
    with open_library() as library:
        result = library.return_book(book_id)
        if not result.success:
            print_error(return_messages(result)[0])
            raise typer.Exit(1)
        save_library(library)

    *notices, done = return_messages(result)
    for notice in notices:
        print_warning(notice)
    print_success(done)


@app.command("loans")
def loans() -> None:
    """List all active loans."""
    with open_library() as library:
        active = library.list_active_loans()
        if not active:
            console.print("[dim]No active loans[/dim]")
            return
        console.print(format_loan_table(library, active, library.clock(), title="Active Loans"))


@app.command("overdue")
def overdue() -> None:
    """Show overdue loans."""
    with open_library() as library:
        overdue_loans = library.list_overdue_loans()
        if not overdue_loans:
            print_success("No overdue loans!")
            return
        console.print(
            format_loan_table(library, overdue_loans, library.clock(), title="Overdue Loans")
        )


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__

    console.print(f"circdesk version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
