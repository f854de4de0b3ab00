import sys
import pathlib

import pytest

# Add project root to sys.path so `library_system` imports without an install
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

from library_system import Book, Catalog, Coordinator, Roster  # noqa: E402

SEED_BOOKS = [
    ("The Great Gatsby", "F. Scott Fitzgerald", True),
    ("To Kill a Mockingbird", "Harper Lee", True),
    ("1984", "George Orwell", False),
]
SEED_USERS = ["Alice", "Bob"]


@pytest.fixture
def catalog():
    return Catalog(Book(t, a, ok) for t, a, ok in SEED_BOOKS)


@pytest.fixture
def roster():
    return Roster(SEED_USERS)


@pytest.fixture
def library(catalog, roster):
    return Coordinator(catalog, roster)
