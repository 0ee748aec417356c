"""Pydantic schemas for submitted catalog forms.

A form validates raw request input into an immutable value. ``to_values``
maps it onto the column/relationship names the store writes.
"""
from datetime import date
from typing import Annotated, Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from locallibrary.models.book_instance import BookInstanceStatus
from locallibrary.schemas.common import FieldError
from locallibrary.schemas.validators import (
    choice,
    optional_date,
    reference,
    reference_list,
    sanitize,
    text,
)


class RecordForm(BaseModel):
    """Base schema for validated form input."""

    model_config = ConfigDict(frozen=True)

    # Form field name -> record attribute name, where they differ.
    field_map: ClassVar[dict[str, str]] = {}

    @classmethod
    def parse(
        cls,
        raw: dict[str, Any],
        context: Optional[dict[str, Any]] = None,
    ) -> tuple[Optional["RecordForm"], list[FieldError]]:
        """Validate raw input, returning the form or every field failure."""
        context = context or {}
        data = {name: raw.get(name) for name in cls.model_fields}
        form, errors = None, []
        try:
            form = cls.model_validate(data)
        except PydanticValidationError as exc:
            errors = [FieldError.from_pydantic(error) for error in exc.errors()]
        errors += cls.cross_field_errors(cls.draft(raw), context)
        if errors:
            return None, errors
        return form, []

    @classmethod
    def cross_field_errors(
        cls,
        values: dict[str, Any],
        context: dict[str, Any],
    ) -> list[FieldError]:
        """Rules spanning several fields, checked on the draft values."""
        return []

    @classmethod
    def draft(cls, raw: dict[str, Any]) -> dict[str, Any]:
        """Best-effort record values for re-rendering a rejected form.

        Fields that validate keep their normalized value; failing text fields
        keep their sanitized input and anything else becomes None.
        """
        values: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            annotation = (
                Annotated[(field.annotation, *field.metadata)]
                if field.metadata
                else field.annotation
            )
            raw_value = raw.get(name)
            try:
                values[name] = TypeAdapter(annotation).validate_python(raw_value)
            except PydanticValidationError:
                values[name] = sanitize(raw_value) if field.annotation is str else None
        return {cls.field_map.get(name, name): value for name, value in values.items()}

    def to_values(self) -> dict[str, Any]:
        """Record values keyed by model attribute."""
        data = self.model_dump()
        return {self.field_map.get(name, name): value for name, value in data.items()}


class AuthorForm(RecordForm):
    """Schema for creating/updating an author."""

    first_name: Annotated[str, text(
        "First name must be specified.",
        max_length=100,
        alphanumeric="First name has non-alphanumeric characters.",
        too_long="First name must not exceed 100 characters.",
    )]
    family_name: Annotated[str, text(
        "Family name must be specified.",
        max_length=100,
        alphanumeric="Family name has non-alphanumeric characters.",
        too_long="Family name must not exceed 100 characters.",
    )]
    date_of_birth: Annotated[Optional[date], optional_date("Invalid date of birth")] = None
    date_of_death: Annotated[Optional[date], optional_date("Invalid date of death")] = None

    @classmethod
    def cross_field_errors(
        cls,
        values: dict[str, Any],
        context: dict[str, Any],
    ) -> list[FieldError]:
        """Reject a death date before the birth date when the check is enabled."""
        if not context.get("check_author_lifespan"):
            return []
        born, died = values["date_of_birth"], values["date_of_death"]
        if born and died and died < born:
            return [FieldError(
                param="date_of_death",
                msg="Date of death must not be earlier than date of birth.",
                value=died,
            )]
        return []


class GenreForm(RecordForm):
    """Schema for creating/updating a genre."""

    name: Annotated[str, text(
        "Genre name must not be empty.",
        max_length=100,
        too_long="Genre name must not exceed 100 characters.",
    )]


class BookForm(RecordForm):
    """Schema for creating/updating a book."""

    field_map: ClassVar[dict[str, str]] = {"author": "author_id", "genre": "genres"}

    title: Annotated[str, text(
        "Title must not be empty.",
        max_length=255,
        too_long="Title must not exceed 255 characters.",
    )]
    author: Annotated[int, reference("Author must not be empty.")]
    summary: Annotated[str, text("Summary must not be empty.")]
    isbn: Annotated[str, text(
        "ISBN must not be empty",
        max_length=32,
        too_long="ISBN must not exceed 32 characters.",
    )]
    genre: Annotated[list[int], reference_list("Invalid genre selection.")] = []


class BookInstanceForm(RecordForm):
    """Schema for creating/updating a book instance."""

    field_map: ClassVar[dict[str, str]] = {"book": "book_id"}

    book: Annotated[int, reference("Book must be specified")]
    imprint: Annotated[str, text(
        "Imprint must be specified",
        max_length=255,
        too_long="Imprint must not exceed 255 characters.",
    )]
    status: Annotated[BookInstanceStatus, choice(
        BookInstanceStatus, "Invalid status.", BookInstanceStatus.MAINTENANCE
    )] = BookInstanceStatus.MAINTENANCE
    due_back: Annotated[Optional[date], optional_date("Invalid date")] = None
