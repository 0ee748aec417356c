"""Book model."""
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.database import Base

if TYPE_CHECKING:
    from locallibrary.models.author import Author
    from locallibrary.models.genre import Genre


book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", ForeignKey("genres.id", ondelete="RESTRICT"), primary_key=True),
)


class Book(Base):
    """Book model referencing one author and any number of genres."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(32), nullable=False)
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Relationships
    author: Mapped["Author"] = relationship(
        "Author", lazy="selectin"
    )
    genres: Mapped[list["Genre"]] = relationship(
        "Genre", secondary=book_genres, lazy="selectin", order_by="Genre.name"
    )

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    @property
    def genre_ids(self) -> list[int]:
        return [genre.id for genre in self.genres]

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title={self.title})>"
