import logging
from threading import RLock
from typing import Iterable, List, Optional

from book import Book

logger = logging.getLogger(__name__)

SEED_BOOKS = (
    ("1", "The Lord of the Rings", "J.R.R. Tolkien"),
    ("2", "Pride and Prejudice", "Jane Austen"),
    ("3", "1984", "George Orwell"),
)

NOT_FOUND_MESSAGE = "Book not found"
CREATE_REQUIRED_MESSAGE = "Title and author are required"
UPDATE_REQUIRED_MESSAGE = "At least one field (title or author) must be provided for update."


class LibraryError(Exception):
    """Base class for errors reported back to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BookNotFoundError(LibraryError):
    """Raised when no book has the requested id."""

    def __init__(self, book_id: str) -> None:
        super().__init__(NOT_FOUND_MESSAGE)
        self.book_id = book_id


class InvalidInputError(LibraryError):
    """Raised when required fields are missing from a create or update."""


def default_books() -> List[Book]:
    return [Book(id=i, title=t, author=a) for i, t, a in SEED_BOOKS]


class Library:
    """Owns the in-memory book collection.

    The collection lives only as long as this object does. All operations are
    linear scans over the list; there is no index. A single lock serializes
    mutations so id generation and append happen as one step when the server
    dispatches requests from several threads.
    """

    def __init__(self, books: Optional[Iterable[Book]] = None, *, seed: bool = True) -> None:
        self._lock = RLock()
        if books is not None:
            self.books: List[Book] = list(books)
        elif seed:
            self.books = default_books()
        else:
            self.books = []

    def __len__(self) -> int:
        return len(self.books)

    # ------------------------- Core operations ------------------------- #
    def list_books(self) -> List[Book]:
        with self._lock:
            return list(self.books)

    def find_book(self, book_id: str) -> Book:
        """Return the book whose id equals ``book_id`` exactly."""
        with self._lock:
            for book in self.books:
                if book.id == book_id:
                    return book
        logger.warning(f"Book {book_id!r} not found")
        raise BookNotFoundError(book_id)

    def next_id(self) -> str:
        """Highest numeric id plus one, as a string.

        Deleting the highest-numbered book frees its id for the next create.
        """
        with self._lock:
            max_id = max((int(b.id) for b in self.books), default=0)
            return str(max_id + 1)

    def add_book(self, title: Optional[str], author: Optional[str]) -> Book:
        if not title or not author:
            raise InvalidInputError(CREATE_REQUIRED_MESSAGE)
        with self._lock:
            book = Book(id=self.next_id(), title=title, author=author)
            self.books.append(book)
        logger.info(f"Added book {book.id}: {book.title} by {book.author}")
        return book

    def update_book(self, book_id: str, *, title: Optional[str] = None, author: Optional[str] = None) -> Book:
        """Update title and/or author in place. Absent fields are left unchanged."""
        with self._lock:
            book = self.find_book(book_id)
            if not title and not author:
                raise InvalidInputError(UPDATE_REQUIRED_MESSAGE)
            if title:
                book.title = title
            if author:
                book.author = author
        logger.info(f"Updated book {book.id}")
        return book

    def remove_book(self, book_id: str) -> None:
        with self._lock:
            initial_length = len(self.books)
            self.books = [b for b in self.books if b.id != book_id]
            removed = len(self.books) < initial_length
        if not removed:
            logger.warning(f"Book {book_id!r} not found")
            raise BookNotFoundError(book_id)
        logger.info(f"Removed book {book_id}")
