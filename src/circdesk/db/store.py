"""Library data file load and save.

The whole library state is written to one SQLite file as a unit and read
back as a unit. The file carries a format version in ``store_meta`` so
that files written by an incompatible layout are detected rather than
misread.
"""

import logging
import os
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Generator, Optional, Union

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, BookRecord, LoanRecord, MemberRecord, StoreMeta
from .schemas import LibraryState

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class LoadStatus(str, Enum):
    """Outcome of reading the data file."""

    LOADED = "loaded"  # File read successfully
    MISSING = "missing"  # No file yet, fresh start
    CORRUPT = "corrupt"  # File unreadable, fresh start
    INCOMPATIBLE = "incompatible"  # Unknown format version, fresh start


class IncompatibleFormatError(Exception):
    """Raised when the data file was written with an unknown format version."""

    pass


@dataclass
class LoadResult:
    """Result of a load operation.

    ``state`` is always usable. When the file could not be read it is a
    fresh empty state and ``error`` describes why.
    """

    state: LibraryState
    status: LoadStatus
    error: Optional[str] = None
    quarantined_path: Optional[Path] = None

    @property
    def success(self) -> bool:
        """True unless existing data had to be discarded."""
        return self.status in (LoadStatus.LOADED, LoadStatus.MISSING)


@dataclass
class SaveResult:
    """Result of a save operation."""

    success: bool
    path: Optional[Path] = None
    error: Optional[str] = None
    size_bytes: int = 0


@contextmanager
def open_session(path: Path, create_schema: bool = False) -> Generator[Session, None, None]:
    """Open a session on the SQLite file at ``path``.

    The engine is disposed on exit so no connection outlives the call.
    """
    engine = create_engine(f"sqlite:///{path}", echo=False)
    try:
        if create_schema:
            Base.metadata.create_all(engine)
        session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    finally:
        engine.dispose()


class LibraryStore:
    """Reads and writes the library state file."""

    def __init__(self, path: Union[str, Path], keep_corrupt: bool = False):
        """Initialize the store.

        Args:
            path: Location of the data file
            keep_corrupt: Copy an unreadable file aside before starting empty
        """
        self.path = Path(path)
        self.keep_corrupt = keep_corrupt

    @property
    def temp_path(self) -> Path:
        """Sibling file that a save is written to before replacing the target."""
        return self.path.with_name(self.path.name + ".tmp")

    # ========================================================================
    # Load
    # ========================================================================

    def load(self) -> LoadResult:
        """Read the stored library state.

        Never raises. A missing file gives an empty state; an unreadable or
        incompatible file gives an empty state plus a diagnostic.
        """
        if not self.path.exists():
            logger.info("No data file at %s, starting with an empty library", self.path)
            return LoadResult(state=LibraryState(), status=LoadStatus.MISSING)

        try:
            state = self._read()
        except IncompatibleFormatError as e:
            return self._start_fresh(LoadStatus.INCOMPATIBLE, str(e))
        except (SQLAlchemyError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            return self._start_fresh(LoadStatus.CORRUPT, str(e))

        logger.info(
            "Loaded %d books, %d members, %d active loans from %s",
            len(state.books),
            len(state.members),
            len(state.loans),
            self.path,
        )
        return LoadResult(state=state, status=LoadStatus.LOADED)

    def _read(self) -> LibraryState:
        with open_session(self.path) as session:
            version = session.get(StoreMeta, "format_version")
            if version is None:
                raise IncompatibleFormatError("Data file has no format version")
            if version.value != str(FORMAT_VERSION):
                raise IncompatibleFormatError(
                    f"Data file format version {version.value} is not supported "
                    f"(expected {FORMAT_VERSION})"
                )

            books = session.execute(
                select(BookRecord).order_by(BookRecord.position)
            ).scalars().all()
            members = session.execute(
                select(MemberRecord).order_by(MemberRecord.position)
            ).scalars().all()
            loans = session.execute(
                select(LoanRecord).order_by(LoanRecord.position)
            ).scalars().all()

            return LibraryState(
                books={b.id: b.to_schema() for b in books},
                members={m.id: m.to_schema() for m in members},
                loans=[loan.to_schema() for loan in loans],
            )

    def _start_fresh(self, status: LoadStatus, reason: str) -> LoadResult:
        logger.warning(
            "Could not load library data from %s (%s): %s. Starting with an empty library.",
            self.path,
            status.value,
            reason,
        )
        quarantined = self._quarantine() if self.keep_corrupt else None
        return LoadResult(
            state=LibraryState(),
            status=status,
            error=reason,
            quarantined_path=quarantined,
        )

    def _quarantine(self) -> Optional[Path]:
        """Copy the unreadable file aside so a later save cannot destroy it."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            shutil.copy2(self.path, target)
        except OSError as e:
            logger.error("Could not keep a copy of %s: %s", self.path, e)
            return None
        logger.warning("Kept a copy of the unreadable data file at %s", target)
        return target

    # ========================================================================
    # Save
    # ========================================================================

    def save(self, state: LibraryState) -> SaveResult:
        """Write the whole library state, replacing any previous file.

        The data is written to a temporary sibling file first and moved
        over the target only once complete. Failures are reported in the
        result and not retried.
        """
        tmp_path = self.temp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if tmp_path.exists():
                tmp_path.unlink()
            self._write(tmp_path, state)
            os.replace(tmp_path, self.path)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to save library data to %s: %s", self.path, e)
            self._discard_temp()
            return SaveResult(success=False, path=self.path, error=str(e))

        logger.info("Saved library data to %s", self.path)
        return SaveResult(
            success=True,
            path=self.path,
            size_bytes=self.path.stat().st_size,
        )

    def _write(self, path: Path, state: LibraryState) -> None:
        from .. import __version__

        with open_session(path, create_schema=True) as session:
            session.add_all(
                [
                    StoreMeta(key="format_version", value=str(FORMAT_VERSION)),
                    StoreMeta(key="app_version", value=__version__),
                    StoreMeta(
                        key="saved_at",
                        value=datetime.now(timezone.utc).isoformat(),
                    ),
                ]
            )
            session.add_all(
                BookRecord.from_schema(book, i)
                for i, book in enumerate(state.books.values())
            )
            session.add_all(
                MemberRecord.from_schema(member, i)
                for i, member in enumerate(state.members.values())
            )
            session.add_all(
                LoanRecord.from_schema(loan, i) for i, loan in enumerate(state.loans)
            )

    def _discard_temp(self) -> None:
        try:
            self.temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", self.temp_path, e)
