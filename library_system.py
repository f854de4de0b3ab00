#!/usr/bin/env python3
"""
library_system.py

In-memory library coordination: a Catalog of books, a Roster of users and a
Coordinator facade that keeps the two consistent on borrow/return.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

# Configuration
LOGGER_NAME = "LibrarySystem"
LOG_FORMAT = "%(levelname)s: %(message)s"

BOOK_COLUMNS = ["Title", "Author", "available"]
USER_COLUMNS = ["Name"]

# Logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(LOGGER_NAME)


@dataclass
class Book:
    """A single title in the catalog. The title is its key."""
    title: str
    author: str
    is_available: bool = True


@dataclass
class User:
    """A library user and the snapshots of the books they currently hold."""
    name: str
    borrowed_books: List[Book] = field(default_factory=list)


UserRef = Union[User, str]


def _user_name(user: UserRef) -> str:
    return user.name if isinstance(user, User) else str(user)


class Catalog:
    """
    Catalog owns every Book record and is the single source of truth for availability.

    Books are kept in a pandas DataFrame in catalog order; callers only ever
    receive Book copies, never the underlying rows.
    """

    def __init__(self, books: Iterable[Book] = ()):
        """
        Initialize the Catalog.

        Args:
            books: seed books, kept in the given order.
        """
        rows = [{"Title": b.title, "Author": b.author, "available": bool(b.is_available)} for b in books]
        self.books_df = pd.DataFrame(rows, columns=BOOK_COLUMNS)
        logger.info("Loaded %d books", len(self.books_df))

    # -------------- Internal helpers ----------------
    @staticmethod
    def _row_to_book(row) -> Book:
        return Book(title=str(row["Title"]), author=str(row["Author"]), is_available=bool(row["available"]))

    def _to_books(self, df: pd.DataFrame) -> List[Book]:
        return [self._row_to_book(row) for _, row in df.iterrows()]

    def _first_index(self, mask: pd.Series):
        """Return the index label of the first True entry in `mask`, or None."""
        hits = mask[mask]
        if hits.empty:
            return None
        return hits.index[0]

    def _title_mask(self, title: str) -> pd.Series:
        return self.books_df["Title"] == title

    def _available_mask(self) -> pd.Series:
        return self.books_df["available"].astype(bool)

    def _search(self, column: str, substring: str) -> List[Book]:
        q = substring or ""
        if q == "":
            return []
        mask = self.books_df[column].astype(str).str.contains(q, case=True, regex=False, na=False)
        return self._to_books(self.books_df.loc[mask])

    # ---------------- Queries ----------------
    def search_by_title(self, substring: str) -> List[Book]:
        """
        Return every book whose title contains `substring` (case-sensitive), in catalog order.

        An empty substring matches nothing.
        """
        return self._search("Title", substring)

    def search_by_author(self, substring: str) -> List[Book]:
        """
        Return every book whose author contains `substring` (case-sensitive), in catalog order.

        An empty substring matches nothing.
        """
        return self._search("Author", substring)

    def check_availability(self, title: str) -> bool:
        """True iff a book with exactly this title exists and is available."""
        return bool((self._title_mask(title) & self._available_mask()).any())

    def has_book(self, title: str) -> bool:
        return bool(self._title_mask(title).any())

    def get_book(self, title: str) -> Optional[Book]:
        """
        Retrieve a single book by exact title.

        Returns a Book copy or None if not found.
        """
        idx = self._first_index(self._title_mask(title))
        if idx is None:
            return None
        return self._row_to_book(self.books_df.loc[idx])

    def list_books(self) -> List[Book]:
        return self._to_books(self.books_df)

    def available_books(self) -> List[Book]:
        return self._to_books(self.books_df.loc[self._available_mask()])

    # ---------------- Mutations ----------------
    def add_book(self, title: str, author: str, available: bool = True) -> bool:
        """
        Add a new title to the catalog.

        Returns True on success, False if a book with the same title already exists.
        """
        if self.has_book(title):
            logger.debug("Attempt to add existing book: %s", title)
            return False
        new_row = pd.DataFrame([{"Title": title, "Author": author, "available": bool(available)}],
                               columns=BOOK_COLUMNS)
        if self.books_df.empty:
            self.books_df = new_row
        else:
            self.books_df = pd.concat([self.books_df, new_row], ignore_index=True)
        logger.info("Added book '%s'", title)
        return True

    def borrow_row(self, title: str):
        """
        Flag the first available book with this exact title as borrowed.

        Returns the index label of the changed row, or None when the title is
        unknown or already borrowed; nothing is changed then.
        """
        idx = self._first_index(self._title_mask(title) & self._available_mask())
        if idx is None:
            return None
        self.books_df.at[idx, "available"] = False
        return idx

    def borrow(self, title: str) -> bool:
        """Flag the first available book with this exact title as borrowed. False if there is none."""
        return self.borrow_row(title) is not None

    def restore_row(self, idx) -> None:
        """Undo `borrow_row` for the row it changed."""
        self.books_df.at[idx, "available"] = True

    def give_back(self, title: str) -> None:
        """Flag the first book with this exact title as available. Unknown titles are ignored."""
        idx = self._first_index(self._title_mask(title))
        if idx is None:
            logger.warning("Book not found: %s", title)
            return
        self.books_df.at[idx, "available"] = True


class Roster:
    """
    Roster owns the users and, per user, the list of books currently borrowed.

    Borrowed entries are snapshots taken at borrow time and are never synced
    with the Catalog.
    """

    def __init__(self, users: Iterable[UserRef] = ()):
        """
        Initialize the Roster.

        Args:
            users: seed users, given as User instances or plain names.
        """
        self.members_df = pd.DataFrame(columns=USER_COLUMNS)
        self._borrowed_map: Dict[str, List[Book]] = {}
        for user in users:
            if isinstance(user, User):
                self.register_user(user.name, user.borrowed_books)
            else:
                self.register_user(str(user))
        logger.info("Loaded %d users", len(self.members_df))

    def has_user(self, name: str) -> bool:
        return name in self._borrowed_map

    def register_user(self, name: str, borrowed_books: Iterable[Book] = ()) -> bool:
        """
        Register a new user.

        Returns True on success, False if the name is already taken.
        """
        if self.has_user(name):
            logger.debug("Attempt to register existing user: %s", name)
            return False
        new_row = pd.DataFrame([{"Name": name}], columns=USER_COLUMNS)
        if self.members_df.empty:
            self.members_df = new_row
        else:
            self.members_df = pd.concat([self.members_df, new_row], ignore_index=True)
        self._borrowed_map[name] = [replace(b) for b in borrowed_books]
        return True

    def get_user(self, name: str) -> Optional[User]:
        """
        Retrieve a user by exact name.

        Returns a User copy (with copied borrowed entries) or None if not found.
        """
        if not self.has_user(name):
            return None
        return User(name=name, borrowed_books=[replace(b) for b in self._borrowed_map[name]])

    def borrowed_titles(self, name: str) -> List[str]:
        return [b.title for b in self._borrowed_map.get(name, [])]

    def holds(self, name: str, title: str) -> bool:
        return title in self.borrowed_titles(name)

    def record_borrow(self, user_name: str, book: Book) -> bool:
        """
        Append a snapshot of `book` to the user's borrowed list.

        Unknown users are ignored; the return value tells whether anything was recorded.
        """
        borrowed = self._borrowed_map.get(user_name)
        if borrowed is None:
            logger.warning("User not found: %s", user_name)
            return False
        borrowed.append(replace(book))
        return True

    def record_return(self, user_name: str, book_title: str) -> bool:
        """
        Remove the first entry titled `book_title` from the user's borrowed list.

        A missing user or entry is a no-op and returns False.
        """
        borrowed = self._borrowed_map.get(user_name)
        if borrowed is None:
            logger.warning("User not found: %s", user_name)
            return False
        for i, b in enumerate(borrowed):
            if b.title == book_title:
                del borrowed[i]
                return True
        return False

    def users_with_borrowed_books(self) -> List[Dict]:
        """
        Return the users who currently hold one or more books.

        Each entry contains the user's name and the list of borrowed titles, in roster order.
        """
        result = []
        for name in self.members_df["Name"]:
            titles = self.borrowed_titles(name)
            if titles:
                result.append({"Name": name, "BorrowedBooks": titles})
        return result


class Coordinator:
    """
    Coordinator is the single entry point for client operations.

    It sequences Catalog and Roster calls so that a borrow or return updates
    both; neither subsystem ever calls the other.
    """

    def __init__(self, catalog: Optional[Catalog] = None, roster: Optional[Roster] = None):
        self.catalog = catalog if catalog is not None else Catalog()
        self.roster = roster if roster is not None else Roster()

    @classmethod
    def from_seed(cls, books: Iterable[Tuple[str, str, bool]], users: Iterable[str]) -> "Coordinator":
        """Build a Coordinator from (title, author, available) tuples and user names."""
        catalog = Catalog(Book(title, author, available) for title, author, available in books)
        return cls(catalog, Roster(users))

    # ---------------- Delegated queries ----------------
    def search_book_by_title(self, substring: str) -> List[Book]:
        return self.catalog.search_by_title(substring)

    def search_book_by_author(self, substring: str) -> List[Book]:
        return self.catalog.search_by_author(substring)

    def check_availability(self, title: str) -> bool:
        return self.catalog.check_availability(title)

    def get_user(self, user: UserRef) -> Optional[User]:
        return self.roster.get_user(_user_name(user))

    def borrowed_books(self, user: UserRef) -> List[Book]:
        found = self.get_user(user)
        return found.borrowed_books if found is not None else []

    def users_with_borrowed_books(self) -> List[Dict]:
        return self.roster.users_with_borrowed_books()

    # ---------------- Core operations ----------------
    def borrow_book(self, user: UserRef, title: str) -> bool:
        """
        Borrow `title` for `user`.

        The Catalog is updated first and gates the Roster update. If the Roster
        cannot record the loan (unknown user) the Catalog flag is restored, so a
        book is never left unavailable without a holder.
        """
        name = _user_name(user)
        idx = self.catalog.borrow_row(title)
        if idx is None:
            logger.warning("Cannot borrow '%s': not found or already borrowed", title)
            return False
        record = Book(title=title, author="", is_available=False)
        if not self.roster.record_borrow(name, record):
            self.catalog.restore_row(idx)
            logger.warning("Borrow of '%s' rolled back for unknown user %s", title, name)
            return False
        logger.info("Borrowed '%s' to %s", title, name)
        return True

    def return_book(self, user: UserRef, title: str) -> None:
        """
        Return `title` for `user`.

        Always clears the user's entry (if any) and then marks the title
        available, whether or not the user held it.
        """
        name = _user_name(user)
        held = self.roster.record_return(name, title)
        self.catalog.give_back(title)
        if held:
            logger.info("Book '%s' returned by %s", title, name)
        else:
            logger.debug("Book '%s' released; %s held no copy", title, name)

    def checkout(self, user: UserRef, title: str) -> Tuple[bool, str]:
        """
        Borrow with an explicit outcome.

        Returns (success, message) where message is human-readable and tells
        an unknown user, an unknown title and an already borrowed title apart.
        """
        name = _user_name(user)
        if not self.roster.has_user(name):
            return False, f"User not found: {name}"
        if not self.catalog.has_book(title):
            return False, f"Book not found: {title}"
        if not self.catalog.check_availability(title):
            return False, f"Book '{title}' is already borrowed."
        if not self.borrow_book(name, title):
            return False, f"Book '{title}' could not be borrowed by {name}."
        return True, f"Book '{title}' borrowed by {name}."

    def checkin(self, user: UserRef, title: str) -> Tuple[bool, str]:
        """
        Return with an explicit outcome.

        Only mutates state when the user actually holds the title.
        Returns (success, message).
        """
        name = _user_name(user)
        if not self.roster.has_user(name):
            return False, f"User not found: {name}"
        if not self.catalog.has_book(title):
            return False, f"Book not found: {title}"
        if not self.roster.holds(name, title):
            return False, f"User {name} does not have '{title}' borrowed."
        self.return_book(name, title)
        return True, f"Book '{title}' returned by {name}."

    # ---------------- Reports ----------------
    def export_report_books(self) -> pd.DataFrame:
        """
        Produce a DataFrame of the catalog with human-friendly Availability values.
        """
        out = self.catalog.books_df.copy()
        out["Availability"] = out["available"].astype(bool).map({True: "Available", False: "Issued"})
        return out[["Title", "Author", "Availability"]].reset_index(drop=True)

    def export_report_members(self) -> pd.DataFrame:
        """
        Build a DataFrame summarizing users and their current borrowed books.

        Returns columns: Name, BorrowedCount, BorrowedBooks (comma separated).
        """
        rows = []
        for name in self.roster.members_df["Name"]:
            titles = self.roster.borrowed_titles(name)
            rows.append({"Name": name, "BorrowedCount": len(titles), "BorrowedBooks": ",".join(titles)})
        return pd.DataFrame(rows, columns=["Name", "BorrowedCount", "BorrowedBooks"])


# ---------------- Demo CLI ----------------
DEMO_BOOKS = [
    ("The Great Gatsby", "F. Scott Fitzgerald", True),
    ("To Kill a Mockingbird", "Harper Lee", True),
    ("1984", "George Orwell", False),
]
DEMO_USERS = ["Alice", "Bob"]


def input_prompt(prompt: str) -> str:
    """
    Read a stripped line from stdin.

    Returns an empty string on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return ""


def _format_book(b: Book) -> str:
    return f"{b.title} | {b.author} | {'Available' if b.is_available else 'Issued'}"


def print_menu():
    print("\n--- Library Coordinator (CLI) ---")
    print("1. List all books")
    print("2. Search book by title")
    print("3. Search book by author")
    print("4. Check availability")
    print("5. Borrow book")
    print("6. Return book")
    print("7. Show users with borrowed books")
    print("8. Register user")
    print("9. Add book")
    print("0. Exit")


def cli_loop(coordinator: Coordinator):
    """
    Interactive command-loop over a Coordinator.

    Presents a text menu, accepts user input and invokes Coordinator methods.
    """
    while True:
        print_menu()
        choice = input_prompt("Choose (0-9): ")
        if choice in ("0", ""):
            print("Exiting.")
            break
        elif choice == "1":
            books = coordinator.catalog.list_books()
            print(f"\nTotal books: {len(books)}")
            for b in books:
                print(_format_book(b))
        elif choice in ("2", "3"):
            q = input_prompt("Search query: ")
            if choice == "2":
                res = coordinator.search_book_by_title(q)
            else:
                res = coordinator.search_book_by_author(q)
            print(f"Found {len(res)} result(s):")
            for b in res:
                print(_format_book(b))
        elif choice == "4":
            title = input_prompt("Title: ")
            ok = coordinator.check_availability(title)
            print(f"'{title}' is available." if ok else f"'{title}' is not available.")
        elif choice == "5":
            name = input_prompt("User: ")
            title = input_prompt("Title: ")
            ok, msg = coordinator.checkout(name, title)
            print(msg)
        elif choice == "6":
            name = input_prompt("User: ")
            title = input_prompt("Title: ")
            ok, msg = coordinator.checkin(name, title)
            print(msg)
        elif choice == "7":
            users = coordinator.users_with_borrowed_books()
            print(f"\nUsers with borrowed books: {len(users)}")
            for u in users:
                print(f"{u['Name']} -> {u['BorrowedBooks']}")
        elif choice == "8":
            name = input_prompt("Name: ")
            ok = coordinator.roster.register_user(name)
            print("Registered." if ok else "Failed (name may exist).")
        elif choice == "9":
            title = input_prompt("Title: ")
            author = input_prompt("Author: ")
            ok = coordinator.catalog.add_book(title, author)
            print("Added." if ok else "Failed (title may exist).")
        else:
            print("Unknown choice. Try again.")


def demo_run():
    """
    Start a demo interactive session seeded with the fixed demo books and users.
    """
    coordinator = Coordinator.from_seed(DEMO_BOOKS, DEMO_USERS)
    print("Welcome, demo library loaded.")
    cli_loop(coordinator)
    print("Goodbye.")


if __name__ == "__main__":
    demo_run()
