"""Book instance (physical copy) model."""
from datetime import date
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.database import Base
from locallibrary.models._formatting import format_date, format_date_for_input

if TYPE_CHECKING:
    from locallibrary.models.book import Book


class BookInstanceStatus(str, PyEnum):
    """Availability of a physical copy."""
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


class BookInstance(Base):
    """A physical copy of a book held by the library."""

    __tablename__ = "book_instances"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    imprint: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[BookInstanceStatus] = mapped_column(
        Enum(BookInstanceStatus, values_callable=lambda e: [m.value for m in e]),
        default=BookInstanceStatus.MAINTENANCE,
        nullable=False,
        index=True,
    )
    due_back: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Relationships
    book: Mapped["Book"] = relationship("Book", lazy="selectin")

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    @property
    def due_back_formatted_for_date_input(self) -> str:
        return format_date_for_input(self.due_back)

    def __repr__(self) -> str:
        return f"<BookInstance(id={self.id}, book_id={self.book_id}, status={self.status})>"
