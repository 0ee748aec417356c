"""SQLAlchemy models."""
from locallibrary.models.author import Author
from locallibrary.models.book import Book, book_genres
from locallibrary.models.book_instance import BookInstance, BookInstanceStatus
from locallibrary.models.genre import Genre

__all__ = [
    "Author",
    "Book",
    "book_genres",
    "BookInstance",
    "BookInstanceStatus",
    "Genre",
]
