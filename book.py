from __future__ import annotations


class Book:
    """Represents a single book record in the collection."""

    def __init__(self, id: str, title: str, author: str) -> None:
        self.id = str(id)
        self.title = title
        self.author = author

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r})"

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(id=data["id"], title=data["title"], author=data["author"])
