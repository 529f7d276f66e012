"""Book inventory router.

Endpoints:
    GET    /api/books                       List books (optional ?category=)
    GET    /api/books/category/{category}   List books in one category
    GET    /api/books/{id}                  Get one book
    POST   /api/books                       Add a book
    PUT    /api/books/{id}                  Replace a book's fields
    DELETE /api/books/{id}                  Delete a book

Every successful mutation appends one activity entry after commit.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from bookstock.deps import get_recorder, get_store
from bookstock.models.activity_log import ActivityType
from bookstock.schemas.book import BookIn, BookOut
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder

router = APIRouter()


@router.get("", response_model=list[BookOut])
async def list_books(
    category: str | None = Query(None),
    store: RecordStore = Depends(get_store),
):
    books = await store.list_books(category=category)
    return [BookOut.model_validate(b) for b in books]


@router.get("/category/{category}", response_model=list[BookOut])
async def list_books_in_category(
    category: str,
    store: RecordStore = Depends(get_store),
):
    books = await store.list_books(category=category)
    return [BookOut.model_validate(b) for b in books]


@router.get("/{book_id}", response_model=BookOut)
async def get_book(book_id: int, store: RecordStore = Depends(get_store)):
    return BookOut.model_validate(await store.get_book(book_id))


@router.post("", response_model=BookOut, status_code=201)
async def create_book(
    body: BookIn,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    """Add a book to the inventory."""
    book = await store.insert_book(body.model_dump())
    await recorder.record_for(ActivityType.BOOK_ADDED, book)
    return BookOut.model_validate(book)


@router.put("/{book_id}", response_model=BookOut)
async def update_book(
    book_id: int,
    body: BookIn,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    book = await store.update_book(book_id, body.model_dump())
    await recorder.record_for(ActivityType.BOOK_UPDATED, book)
    return BookOut.model_validate(book)


@router.delete("/{book_id}", status_code=204, response_class=Response)
async def delete_book(
    book_id: int,
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    book = await store.delete_book(book_id)
    await recorder.record_for(ActivityType.BOOK_DELETED, book)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
