"""Books router: server-rendered catalog pages."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from library_catalog.api.http.deps import get_book_catalog, get_book_form
from library_catalog.api.http.templating import templates
from library_catalog.core.errors import BookValidationError
from library_catalog.core.services import BookCatalog, BookPage
from library_catalog.entities.book import Book

router = APIRouter(prefix="/books", tags=["books"])


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _render_index(request: Request, page: BookPage) -> Response:
    return templates.TemplateResponse(
        request,
        "books/index.html",
        {
            "books": page.books,
            "title": page.title,
            "search_query": page.search_query,
            "pages": page.pages,
            "current_page": page.current_page,
            "page_link": page.page_link,
            "total": page.total,
        },
    )


def _render_form(
    request: Request,
    template: str,
    book: Book | None,
    title: str,
    errors: BookValidationError | None = None,
) -> Response:
    return templates.TemplateResponse(
        request,
        template,
        {
            "book": book,
            "title": title,
            "errors": errors.errors if errors else [],
        },
    )


@router.get("", response_class=RedirectResponse)
def books_home() -> RedirectResponse:
    """Redirect to the first page of the book list."""
    return RedirectResponse("/books/allbooks/page/1", status_code=status.HTTP_302_FOUND)


@router.get("/allbooks/page/{page}")
def list_books(
    request: Request,
    page: int,
    catalog: BookCatalog = Depends(get_book_catalog),
) -> Response:
    """Show one page of all books, newest first."""
    return _render_index(request, catalog.list_page(page))


@router.get("/new")
def new_book_form(request: Request) -> Response:
    """Show the empty create form."""
    return _render_form(request, "books/new-book.html", None, "New Book")


@router.get("/search/{query:path}/page/{page}")
def search_books(
    request: Request,
    query: str,
    page: int,
    catalog: BookCatalog = Depends(get_book_catalog),
) -> Response:
    """Show one page of books whose title, author, genre or year contains the query."""
    return _render_index(request, catalog.search(query, page))


@router.post("", response_class=RedirectResponse)
def submit_search(search: str = Form("")) -> RedirectResponse:
    """Turn the search box submission into a search results URL."""
    search = search.strip()
    if not search:
        return _see_other("/books/allbooks/page/1")
    return _see_other(f"/books/search/{quote(search, safe='')}/page/1")


@router.post("/new")
def create_book(
    request: Request,
    form: dict = Depends(get_book_form),
    catalog: BookCatalog = Depends(get_book_catalog),
) -> Response:
    """Create a book, then send the user to its edit page."""
    try:
        book = catalog.create(form)
    except BookValidationError as exc:
        return _render_form(request, "books/new-book.html", exc.book, "New Book", exc)
    return _see_other(f"/books/{book.id}/edit")


@router.get("/{book_id}")
@router.get("/{book_id}/edit")
def edit_book_form(
    request: Request,
    book_id: str,
    catalog: BookCatalog = Depends(get_book_catalog),
) -> Response:
    """Show a book in its edit form."""
    book = catalog.get(book_id)
    return _render_form(request, "books/update-book.html", book, book.title)


@router.post("/{book_id}/edit")
def update_book(
    request: Request,
    book_id: str,
    form: dict = Depends(get_book_form),
    catalog: BookCatalog = Depends(get_book_catalog),
) -> Response:
    """Save an edited book."""
    try:
        catalog.update(book_id, form)
    except BookValidationError as exc:
        return _render_form(request, "books/update-book.html", exc.book, "Edit Book", exc)
    return _see_other("/books")


@router.post("/{book_id}/delete")
def delete_book(
    book_id: str,
    catalog: BookCatalog = Depends(get_book_catalog),
) -> RedirectResponse:
    """Delete a book permanently."""
    catalog.delete(book_id)
    return _see_other("/books")
