import logging
from typing import Any, Dict, List, Optional

import httpx

from book import Book
from config import settings

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised when the book service answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BooksClient:
    """Synchronous client for a running book collection service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = (base_url or settings.base_url).rstrip("/")
        timeout = httpx.Timeout(
            timeout=timeout or settings.client_timeout,
            connect=5.0,
        )
        # An existing client (e.g. a test client bound to the app) may be supplied
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._client.request(method, path, **kwargs)
        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.is_success:
            return response.json()
        try:
            message = response.json().get("message") or response.text
        except ValueError:
            message = response.text
        raise ServiceError(response.status_code, message)

    def list_books(self) -> List[Book]:
        return [Book.from_dict(item) for item in self._request("GET", "/books")]

    def get_book(self, book_id: str) -> Book:
        return Book.from_dict(self._request("GET", f"/books/{book_id}"))

    def create_book(self, title: str, author: str) -> Book:
        return Book.from_dict(self._request("POST", "/books", json={"title": title, "author": author}))

    def update_book(self, book_id: str, *, title: Optional[str] = None, author: Optional[str] = None) -> Book:
        payload: Dict[str, str] = {}
        if title is not None:
            payload["title"] = title
        if author is not None:
            payload["author"] = author
        return Book.from_dict(self._request("PUT", f"/books/{book_id}", json=payload))

    def delete_book(self, book_id: str) -> str:
        return self._request("DELETE", f"/books/{book_id}")["message"]

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
