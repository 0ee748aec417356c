"""Genre model."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base


class Genre(Base):
    """Genre model; names are unique across the catalog."""

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name={self.name})>"
