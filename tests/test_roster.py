from library_system import Book, Roster, User


def test_record_borrow_appends_snapshot(roster):
    book = Book("Dune", "Frank Herbert", False)
    assert roster.record_borrow("Alice", book) is True
    book.author = "changed"
    assert roster.get_user("Alice").borrowed_books == [Book("Dune", "Frank Herbert", False)]


def test_record_borrow_unknown_user_is_noop(roster):
    assert roster.record_borrow("Mallory", Book("Dune", "Frank Herbert")) is False
    assert roster.has_user("Mallory") is False
    assert roster.users_with_borrowed_books() == []


def test_record_return_removes_first_match_only(roster):
    roster.record_borrow("Bob", Book("Dune", "a"))
    roster.record_borrow("Bob", Book("Emma", "b"))
    roster.record_borrow("Bob", Book("Dune", "c"))
    assert roster.record_return("Bob", "Dune") is True
    assert [(b.title, b.author) for b in roster.get_user("Bob").borrowed_books] == [("Emma", "b"), ("Dune", "c")]


def test_record_return_missing_entries_are_noops(roster):
    roster.record_borrow("Alice", Book("Dune", ""))
    assert roster.record_return("Alice", "Emma") is False
    assert roster.record_return("Mallory", "Dune") is False
    assert roster.borrowed_titles("Alice") == ["Dune"]


def test_register_user(roster):
    assert roster.register_user("Carol") is True
    assert roster.register_user("Alice") is False
    assert list(roster.members_df["Name"]) == ["Alice", "Bob", "Carol"]


def test_seed_accepts_user_instances():
    roster = Roster([User("Dana", [Book("Dune", "Frank Herbert", False)]), "Eve"])
    assert roster.holds("Dana", "Dune") is True
    assert roster.borrowed_titles("Eve") == []
    assert roster.users_with_borrowed_books() == [{"Name": "Dana", "BorrowedBooks": ["Dune"]}]


def test_get_user_returns_copy(roster):
    roster.record_borrow("Alice", Book("Dune", ""))
    user = roster.get_user("Alice")
    user.borrowed_books.clear()
    assert roster.borrowed_titles("Alice") == ["Dune"]
    assert roster.get_user("Mallory") is None
