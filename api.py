import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from library import Library, BookNotFoundError, InvalidInputError
from config import settings

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)


# --- Models ---
class BookModel(BaseModel):
    id: str
    title: str
    author: str

class BookCreateModel(BaseModel):
    title: Optional[str] = Field(default=None, description="Required, non-empty")
    author: Optional[str] = Field(default=None, description="Required, non-empty")

class BookUpdateModel(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None

class MessageModel(BaseModel):
    message: str


# --- Dependencies ---
def get_library(request: Request) -> Library:
    """Dependency returning the store owned by the running application."""
    return request.app.state.library


def json_body(model):
    """Dependency factory building ``model`` from the request body.

    Only ``application/json`` bodies are parsed. Any other content type, an
    empty body, or JSON that is not an object counts as ``{}``, so presence
    checks in the store decide the outcome. Unparseable JSON and fields of the
    wrong type are reported as FastAPI validation errors.
    """
    async def dependency(request: Request):
        data = {}
        content_type = request.headers.get("content-type", "")
        if "json" in content_type.lower():
            raw = await request.body()
            if raw.strip():
                try:
                    data = await request.json()
                except ValueError:
                    raise RequestValidationError(
                        [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
                    )
        if not isinstance(data, dict):
            data = {}
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
            )
    return dependency


def _log_startup(app: FastAPI) -> None:
    base = settings.base_url
    logger.info(f"{app.title} is running on {base}")
    logger.info("Host and port come from API_HOST / API_PORT (default 127.0.0.1:3000)")
    logger.info("Available endpoints:")
    logger.info(f"  GET all books:     GET {base}/books")
    logger.info(f"  GET book by ID:    GET {base}/books/1")
    logger.info(f"  POST new book:     POST {base}/books")
    logger.info('    Body: {"title": "New Book", "author": "New Author"}')
    logger.info(f"  PUT update book:   PUT {base}/books/1")
    logger.info('    Body: {"title": "Updated Title"}')
    logger.info(f"  DELETE book by ID: DELETE {base}/books/1")


@asynccontextmanager
async def lifespan(app: FastAPI):
    _log_startup(app)
    yield
    logger.info(f"Shutting down with {len(app.state.library)} books in memory")


def create_app(library: Optional[Library] = None) -> FastAPI:
    """Build the application around ``library`` (a freshly seeded one by default)."""
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.library = library if library is not None else Library()

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Error handling ---
    @app.exception_handler(BookNotFoundError)
    async def not_found_handler(request: Request, exc: BookNotFoundError):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return JSONResponse(status_code=400, content={"message": exc.message})

    # --- API Endpoints ---
    @app.get("/books", response_model=List[BookModel])
    def list_books(library: Library = Depends(get_library)):
        """Return every book currently in the collection."""
        logger.info("GET /books request received")
        return [BookModel(**b.to_dict()) for b in library.list_books()]

    @app.get("/books/{book_id}", response_model=BookModel, responses={404: {"model": MessageModel}})
    def get_book(book_id: str, library: Library = Depends(get_library)):
        logger.info(f"GET /books/{book_id} request received")
        return BookModel(**library.find_book(book_id).to_dict())

    @app.post("/books", response_model=BookModel, status_code=201, responses={400: {"model": MessageModel}})
    def add_book(
        payload: BookCreateModel = Depends(json_body(BookCreateModel)),
        library: Library = Depends(get_library),
    ):
        """Create a book; the id is assigned by the service."""
        logger.info(f"POST /books request received {payload.model_dump(exclude_unset=True)}")
        book = library.add_book(payload.title, payload.author)
        return BookModel(**book.to_dict())

    @app.put(
        "/books/{book_id}",
        response_model=BookModel,
        responses={400: {"model": MessageModel}, 404: {"model": MessageModel}},
    )
    def update_book(
        book_id: str,
        update: BookUpdateModel = Depends(json_body(BookUpdateModel)),
        library: Library = Depends(get_library),
    ):
        """Update title and/or author of a book by id."""
        logger.info(f"PUT /books/{book_id} request received {update.model_dump(exclude_unset=True)}")
        book = library.update_book(book_id, title=update.title, author=update.author)
        return BookModel(**book.to_dict())

    @app.delete("/books/{book_id}", response_model=MessageModel, responses={404: {"model": MessageModel}})
    def delete_book(book_id: str, library: Library = Depends(get_library)):
        logger.info(f"DELETE /books/{book_id} request received")
        library.remove_book(book_id)
        return MessageModel(message=f"Book with ID {book_id} deleted successfully")

    return app


app = create_app()
