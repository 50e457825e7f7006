# app/api/routers/books.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import http_error
from app.data.database import get_db
from app.domain.errors import AppError
from app.domain.schemas import BookCreate, BookOut, BookUpdate
from app.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["books"])


@router.post("/", response_model=BookOut, status_code=201)
def create_book(payload: BookCreate, db: Session = Depends(get_db)):
    return BookService(db).create_book(payload)


@router.get("/", response_model=List[BookOut])
def list_books(db: Session = Depends(get_db)):
    return BookService(db).list_active_books()


@router.get("/random", response_model=List[BookOut])
def random_books(
    n: int = Query(5, gt=0, le=50),
    seed: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return BookService(db).sample_active_books(n, seed)


@router.get("/{book_id}", response_model=BookOut)
def get_book(book_id: int, db: Session = Depends(get_db)):
    try:
        return BookService(db).get_book(book_id)
    except AppError as e:
        raise http_error(e)


@router.patch("/{book_id}", response_model=BookOut)
def update_book(book_id: int, payload: BookUpdate, db: Session = Depends(get_db)):
    try:
        return BookService(db).update_book(book_id, payload)
    except AppError as e:
        raise http_error(e)
