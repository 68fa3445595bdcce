import subprocess
import sys
from functools import wraps
from typing import Optional

import httpx
import typer

from config import settings
from http_client import BooksClient, ServiceError
from utils.ui_helpers import (
    set_output_mode,
    print_list_result,
    print_book_result,
    print_message,
    print_error,
)

APP_NAME = "Book Collection CLI"

app = typer.Typer(help=APP_NAME)

_state = {"base_url": None}


def get_client() -> BooksClient:
    """Client for the service selected with --base-url (settings by default)."""
    return BooksClient(base_url=_state["base_url"])


def handle_service_errors(func):
    """Turn service and connection failures into an error line and exit code 1."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ServiceError as e:
            print_error(e.message)
            raise typer.Exit(code=1)
        except httpx.RequestError as e:
            print_error(f"Could not reach the service ({e}). Start it with `serve`.")
            raise typer.Exit(code=1)
    return wrapper


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Service URL (default: http://API_HOST:API_PORT)",
    ),
):
    """Global options for the CLI (output mode, service URL)."""
    if output:
        set_output_mode(output)
    _state["base_url"] = base_url


@app.command("list")
@handle_service_errors
def cli_list():
    """List all books."""
    with get_client() as client:
        print_list_result(client.list_books())


@app.command("get")
@handle_service_errors
def cli_get(book_id: str):
    """Show a single book by id."""
    with get_client() as client:
        print_book_result(client.get_book(book_id), heading="Book Found")


@app.command("add")
@handle_service_errors
def cli_add(title: str, author: str):
    """Add a book; the service assigns its id."""
    with get_client() as client:
        book = client.create_book(title, author)
    print_message(f"Added: {book.id} - {book.title} by {book.author}")


@app.command("update")
@handle_service_errors
def cli_update(
    book_id: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
):
    """Update the title and/or author of a book."""
    with get_client() as client:
        book = client.update_book(book_id, title=title, author=author)
    print_book_result(book, heading="Book Updated")


@app.command("remove")
@handle_service_errors
def cli_remove(book_id: str):
    """Delete a book by id."""
    with get_client() as client:
        print_message(client.delete_book(book_id))


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Restart on code changes"),
):
    """Start the API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    print(f"Starting server on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args)
    except FileNotFoundError:
        print_error("`uvicorn` could not be started. Make sure it is installed in this environment.")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
