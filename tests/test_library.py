from concurrent.futures import ThreadPoolExecutor

import pytest

from library import Library, BookNotFoundError, InvalidInputError
from book import Book


def ids(lib):
    return [b.id for b in lib.list_books()]


def test_seeded_collection(lib):
    books = lib.list_books()
    assert [b.id for b in books] == ["1", "2", "3"]
    assert books[0].title == "The Lord of the Rings"
    assert books[1].author == "Jane Austen"
    assert books[2].title == "1984"

def test_empty_collection():
    lib = Library(seed=False)
    assert lib.list_books() == []
    assert lib.next_id() == "1"

def test_list_returns_copy(lib):
    books = lib.list_books()
    books.clear()
    assert len(lib) == 3

def test_add_assigns_max_plus_one(lib):
    book = lib.add_book("Dune", "Frank Herbert")
    assert book.id == "4"
    assert ids(lib) == ["1", "2", "3", "4"]

def test_add_uses_numeric_max_not_last():
    lib = Library([Book("10", "A", "B"), Book("2", "C", "D")])
    assert lib.add_book("E", "F").id == "11"

def test_add_first_book_gets_id_one():
    lib = Library(seed=False)
    assert lib.add_book("Dune", "Frank Herbert").id == "1"

@pytest.mark.parametrize("title, author", [
    ("NoAuthor", None),
    (None, "Nobody"),
    ("", "Someone"),
    ("Something", ""),
    (None, None),
])
def test_add_requires_title_and_author(lib, title, author):
    with pytest.raises(InvalidInputError, match="Title and author are required"):
        lib.add_book(title, author)
    assert len(lib) == 3

def test_find_book(lib):
    assert lib.find_book("2").title == "Pride and Prejudice"

def test_find_book_is_exact_match(lib):
    with pytest.raises(BookNotFoundError):
        lib.find_book("01")
    with pytest.raises(BookNotFoundError):
        lib.find_book(" 1")

def test_update_book_partial(lib):
    updated = lib.update_book("2", title="Pride & Prejudice")
    assert updated.title == "Pride & Prejudice"
    assert updated.author == "Jane Austen"

    updated = lib.update_book("2", author="J. Austen")
    assert updated.title == "Pride & Prejudice"
    assert updated.author == "J. Austen"
    assert lib.find_book("2").author == "J. Austen"

def test_update_keeps_id_and_position(lib):
    lib.update_book("1", title="The Hobbit", author="Tolkien")
    assert ids(lib) == ["1", "2", "3"]
    assert lib.find_book("1").title == "The Hobbit"

def test_update_book_not_found(lib):
    before = [b.to_dict() for b in lib.list_books()]
    with pytest.raises(BookNotFoundError):
        lib.update_book("99", title="New Title")
    assert [b.to_dict() for b in lib.list_books()] == before

def test_update_not_found_checked_before_fields(lib):
    with pytest.raises(BookNotFoundError):
        lib.update_book("99")

def test_update_requires_a_field(lib):
    before = [b.to_dict() for b in lib.list_books()]
    with pytest.raises(InvalidInputError, match="At least one field"):
        lib.update_book("1")
    with pytest.raises(InvalidInputError):
        lib.update_book("1", title="", author="")
    assert [b.to_dict() for b in lib.list_books()] == before

def test_remove_book(lib):
    lib.remove_book("1")
    assert ids(lib) == ["2", "3"]
    with pytest.raises(BookNotFoundError):
        lib.find_book("1")

def test_remove_book_not_found(lib):
    with pytest.raises(BookNotFoundError):
        lib.remove_book("99")
    assert len(lib) == 3

def test_id_reused_after_removing_highest(lib):
    lib.remove_book("3")
    assert lib.add_book("Dune", "Frank Herbert").id == "3"

def test_gap_below_max_is_not_filled(lib):
    lib.remove_book("2")
    assert lib.add_book("Dune", "Frank Herbert").id == "4"
    assert ids(lib) == ["1", "3", "4"]

def test_concurrent_adds_get_distinct_ids():
    lib = Library(seed=False)
    count = 200
    with ThreadPoolExecutor(max_workers=8) as pool:
        books = list(pool.map(lambda n: lib.add_book(f"Title {n}", f"Author {n}"), range(count)))
    assert {b.id for b in books} == {str(n) for n in range(1, count + 1)}
    assert len(lib) == count
    assert sorted(int(i) for i in ids(lib)) == list(range(1, count + 1))
