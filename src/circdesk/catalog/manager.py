"""Catalog manager for book records."""

from typing import Optional

from ..db.schemas import AddError, AddResult, Book, LibraryState


class CatalogManager:
    """Manages the set of catalogued books."""

    def __init__(self, state: LibraryState):
        """Initialize catalog manager.

        Args:
            state: Library state whose books this manager owns
        """
        self.state = state

    def add_book(self, book_id: int, title: str, author: str) -> AddResult:
        """Add a new book to the catalog.

        Args:
            book_id: Unique book ID
            title: Book title
            author: Book author

        Returns:
            AddResult, with DUPLICATE_ID if the ID is already taken
        """
        if book_id in self.state.books:
            return AddResult(success=False, error=AddError.DUPLICATE_ID)

        self.state.books[book_id] = Book(id=book_id, title=title, author=author)
        return AddResult(success=True)

    def find_book(self, book_id: int) -> Optional[Book]:
        """Get a book by ID.

        Args:
            book_id: Book ID

        Returns:
            Book or None
        """
        return self.state.books.get(book_id)

    def list_books(self) -> list[Book]:
        """List all books in the order they were added.

        The list is new, but the books in it are the live records. Change
        a book's issued flag only through CirculationManager.
        """
        return list(self.state.books.values())
