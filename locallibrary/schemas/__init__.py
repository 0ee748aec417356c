"""Pydantic schemas."""
from locallibrary.schemas.common import BaseSchema, FieldError, StatusResponse
from locallibrary.schemas.forms import (
    AuthorForm,
    BookForm,
    BookInstanceForm,
    GenreForm,
    RecordForm,
)

__all__ = [
    "BaseSchema",
    "FieldError",
    "StatusResponse",
    "RecordForm",
    "AuthorForm",
    "GenreForm",
    "BookForm",
    "BookInstanceForm",
]
