"""Author model."""
from datetime import date
from typing import Optional

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base
from locallibrary.models._formatting import format_date, format_date_for_input


class Author(Base):
    """Author model; display fields are computed, never stored."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    @property
    def name(self) -> str:
        """Full name as ``family, first``; empty if either part is missing."""
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @property
    def date_of_birth_formatted(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_date(self.date_of_death)

    @property
    def date_of_birth_formatted_for_date_input(self) -> str:
        return format_date_for_input(self.date_of_birth)

    @property
    def date_of_death_formatted_for_date_input(self) -> str:
        return format_date_for_input(self.date_of_death)

    @property
    def lifespan(self) -> str:
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name={self.name})>"
