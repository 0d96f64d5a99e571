"""SQLAlchemy ORM models for the library data file.

Tables:
- store_meta: Key/value pairs describing the file (format version)
- books: Catalogued books
- members: Registered members
- loans: Active loans, in issue order
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import Book, Loan, Member


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StoreMeta(Base):
    """Store metadata - one row per key."""

    __tablename__ = "store_meta"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<StoreMeta(key='{self.key}', value='{self.value}')>"


class BookRecord(Base):
    """Persisted book row."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    issued: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<BookRecord(id={self.id}, title='{self.title}')>"

    @classmethod
    def from_schema(cls, book: Book, position: int) -> "BookRecord":
        return cls(
            id=book.id,
            position=position,
            title=book.title,
            author=book.author,
            issued=book.issued,
        )

    def to_schema(self) -> Book:
        return Book(id=self.id, title=self.title, author=self.author, issued=self.issued)


class MemberRecord(Base):
    """Persisted member row."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<MemberRecord(id={self.id}, name='{self.name}')>"

    @classmethod
    def from_schema(cls, member: Member, position: int) -> "MemberRecord":
        return cls(id=member.id, position=position, name=member.name)

    def to_schema(self) -> Member:
        return Member(id=self.id, name=self.name)


class LoanRecord(Base):
    """Persisted active loan row."""

    __tablename__ = "loans"

    # Position in the active loan list
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id"),
        nullable=False,
        unique=True,
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id"),
        nullable=False,
        index=True,
    )

    # Dates
    issue_date: Mapped[str] = mapped_column(String(10), nullable=False)  # ISO date
    due_date: Mapped[str] = mapped_column(String(10), nullable=False)  # ISO date

    def __repr__(self) -> str:
        return f"<LoanRecord(book_id={self.book_id}, member_id={self.member_id}, due={self.due_date})>"

    @classmethod
    def from_schema(cls, loan: Loan, position: int) -> "LoanRecord":
        return cls(
            position=position,
            book_id=loan.book_id,
            member_id=loan.member_id,
            issue_date=loan.issue_date.isoformat(),
            due_date=loan.due_date.isoformat(),
        )

    def to_schema(self) -> Loan:
        return Loan(
            book_id=self.book_id,
            member_id=self.member_id,
            issue_date=self.issue_date,
            due_date=self.due_date,
        )
