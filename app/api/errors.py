# app/api/errors.py
from fastapi import HTTPException

from app.domain.errors import AppError


def http_error(e: AppError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_detail())
