import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKS_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _book_dict(book: Any) -> dict:
    return {"id": getattr(book, "id", ""), "title": getattr(book, "title", ""), "author": getattr(book, "author", "")}

def print_list_result(books: List[Any]) -> None:
    """Print a list of books in the current output mode.
    - plain: 'ID - Title by Author' lines, or 'No books in collection.'
    - json: JSON array of id, title, author
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([_book_dict(b) for b in books], ensure_ascii=False))
        return

    if not books:
        print("No books in collection.")
        return

    if mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        for b in books:
            table.add_row(b.id, b.title, b.author)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author}")

def print_book_result(book: Any, heading: str = "Book") -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(_book_dict(book), ensure_ascii=False))
    elif mode == "rich":
        content = f"[bold]ID:[/] {book.id}\n[bold]Title:[/] {book.title}\n[bold]Author:[/] {book.author}"
        _console.print(Panel.fit(content, title=f"📖 {heading}", border_style="green"))
    else:
        print(heading)
        print(f"ID: {book.id}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")

def print_message(message: str) -> None:
    if get_output_mode() == "json":
        print(json.dumps({"message": message}, ensure_ascii=False))
    else:
        print(message)

def print_error(message: str) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[bold red]Error:[/] {message}")
    else:
        print(f"Error: {message}")
