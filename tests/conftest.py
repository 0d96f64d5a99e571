"""Pytest configuration and shared fixtures.

This module provides fixtures for testing circdesk, including a
controllable clock, fresh library state and temporary data files.
"""

from datetime import date, timedelta
from pathlib import Path

import pytest

from circdesk.catalog import CatalogManager
from circdesk.circulation import CirculationManager
from circdesk.config import reset_config
from circdesk.db.schemas import LibraryState
from circdesk.db.store import LibraryStore
from circdesk.library import Library
from circdesk.membership import MembershipManager


class FakeClock:
    """A clock that stays put until told to move."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2025-03-01."""
    return FakeClock(date(2025, 3, 1))


@pytest.fixture
def state() -> LibraryState:
    """Create an empty library state."""
    return LibraryState()


@pytest.fixture
def catalog(state: LibraryState) -> CatalogManager:
    return CatalogManager(state)


@pytest.fixture
def membership(state: LibraryState) -> MembershipManager:
    return MembershipManager(state)


@pytest.fixture
def circulation(state: LibraryState, clock: FakeClock) -> CirculationManager:
    return CirculationManager(state, clock=clock)


@pytest.fixture
def stocked(catalog: CatalogManager, membership: MembershipManager) -> None:
    """Add a few books and members to the shared state."""
    catalog.add_book(1, "The Hobbit", "J.R.R. Tolkien")
    catalog.add_book(2, "Dune", "Frank Herbert")
    catalog.add_book(3, "Emma", "Jane Austen")
    membership.add_member(9, "Asha")
    membership.add_member(10, "Ben")


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    """Path for a data file that does not exist yet."""
    return tmp_path / "library.db"


@pytest.fixture
def store(data_path: Path) -> LibraryStore:
    return LibraryStore(data_path)


@pytest.fixture
def library(store: LibraryStore, clock: FakeClock) -> Library:
    """Create a library over an empty temporary store."""
    lib = Library(store, clock=clock)
    lib.load()
    return lib


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_env(data_path: Path, monkeypatch):
    """Point the CLI at a temporary data file."""
    reset_config()
    monkeypatch.setenv("CIRCDESK_DATA_PATH", str(data_path))
    monkeypatch.delenv("CIRCDESK_KEEP_CORRUPT", raising=False)
    monkeypatch.delenv("CIRCDESK_LOAN_DAYS", raising=False)
    monkeypatch.delenv("CIRCDESK_FINE_PER_DAY", raising=False)
    monkeypatch.delenv("CIRCDESK_LOG_LEVEL", raising=False)
    yield data_path
    reset_config()


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()
