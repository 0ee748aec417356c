"""Descriptors for the four catalog record types."""
from locallibrary.models import Author, Book, BookInstance, Genre
from locallibrary.schemas.forms import AuthorForm, BookForm, BookInstanceForm, GenreForm
from locallibrary.services.catalog import Dependent, EntityType, Reference


def _copy_title(instance: BookInstance) -> str:
    book_title = instance.book.title if instance.book is not None else ""
    return f"Copy: {book_title}"


AUTHOR = EntityType(
    name="author",
    label="Author",
    model=Author,
    form=AuthorForm,
    list_url="/catalog/authors",
    list_title="Author List",
    detail_title=lambda author: "Author Detail",
    order_by=Author.family_name,
    dependents=(
        Dependent(
            key="author_books",
            model=Book,
            criterion=lambda author_id: Book.author_id == author_id,
            order_by=Book.title,
        ),
    ),
)

GENRE = EntityType(
    name="genre",
    label="Genre",
    model=Genre,
    form=GenreForm,
    list_url="/catalog/genres",
    list_title="Genre List",
    detail_title=lambda genre: "Genre Detail",
    order_by=Genre.name,
    dependents=(
        Dependent(
            key="genre_books",
            model=Book,
            criterion=lambda genre_id: Book.genres.any(Genre.id == genre_id),
            order_by=Book.title,
        ),
    ),
    unique_field="name",
    unique_message="A genre with this name already exists.",
)

BOOK = EntityType(
    name="book",
    label="Book",
    model=Book,
    form=BookForm,
    list_url="/catalog/books",
    list_title="Book List",
    detail_title=lambda book: book.title,
    order_by=Book.title,
    dependents=(
        Dependent(
            key="book_instances",
            model=BookInstance,
            criterion=lambda book_id: BookInstance.book_id == book_id,
        ),
    ),
    references=(
        Reference(
            key="authors",
            model=Author,
            field="author_id",
            param="author",
            missing_message="Author not found.",
            order_by=Author.family_name,
        ),
        Reference(
            key="genres",
            model=Genre,
            field="genres",
            param="genre",
            missing_message="Selected genre not found.",
            order_by=Genre.name,
        ),
    ),
)

BOOK_INSTANCE = EntityType(
    name="bookinstance",
    label="BookInstance",
    model=BookInstance,
    form=BookInstanceForm,
    list_url="/catalog/bookinstances",
    list_title="Book Instance List",
    detail_title=_copy_title,
    references=(
        Reference(
            key="books",
            model=Book,
            field="book_id",
            param="book",
            missing_message="Book not found.",
            order_by=Book.title,
        ),
    ),
)

ENTITY_TYPES = (AUTHOR, GENRE, BOOK, BOOK_INSTANCE)
