"""Catalog manager operations against a real (SQLite) store."""
import pytest

from locallibrary.core.exceptions import NotFoundError
from locallibrary.models import Author, Book, BookInstance, Genre
from locallibrary.services import Redirect, Render
from tests.conftest import record_id

JANE = {"first_name": "Jane", "family_name": "Austen", "date_of_birth": "1775-12-16"}


async def create(manager, raw) -> int:
    outcome = await manager.create_submit(raw)
    assert isinstance(outcome, Redirect), outcome
    return record_id(outcome.url)


async def create_book(authors, books, genre_ids=()) -> tuple[int, int]:
    author_id = await create(authors, JANE)
    book_id = await create(books, {
        "title": "Emma",
        "author": str(author_id),
        "summary": "A comedy of manners.",
        "isbn": "9780141439587",
        "genre": [str(g) for g in genre_ids],
    })
    return author_id, book_id


@pytest.mark.asyncio
async def test_create_author_then_detail(authors, store):
    author_id = await create(authors, JANE)

    outcome = await authors.detail(author_id)
    assert outcome.view == "author_detail"
    assert outcome.data["title"] == "Author Detail"
    assert outcome.data["author"].name == "Austen, Jane"
    assert outcome.data["author_books"] == []
    assert await store.count(Author) == 1


@pytest.mark.asyncio
async def test_invalid_submission_persists_nothing(authors, store):
    outcome = await authors.create_submit(
        {"first_name": "", "family_name": "Aus ten", "date_of_death": "not-a-date"}
    )
    assert isinstance(outcome, Render)
    assert outcome.view == "author_form"
    assert len(outcome.data["errors"]) == 3
    assert outcome.data["author"].family_name == "Aus ten"
    assert outcome.data["input"]["date_of_death"] == "not-a-date"
    assert await store.count(Author) == 0


@pytest.mark.asyncio
async def test_list_orders_by_display_key(authors, genres):
    await create(authors, {"first_name": "Leo", "family_name": "Tolstoy"})
    await create(authors, JANE)
    await create(genres, {"name": "Poetry"})
    await create(genres, {"name": "Fantasy"})

    outcome = await authors.list_records()
    assert outcome.data["title"] == "Author List"
    assert [a.family_name for a in outcome.data["author_list"]] == ["Austen", "Tolstoy"]

    outcome = await genres.list_records()
    assert [g.name for g in outcome.data["genre_list"]] == ["Fantasy", "Poetry"]


@pytest.mark.asyncio
async def test_detail_missing_record(books):
    with pytest.raises(NotFoundError):
        await books.detail(999)


@pytest.mark.asyncio
async def test_genre_create_is_idempotent(genres, store):
    first = await genres.create_submit({"name": "Fantasy"})
    second = await genres.create_submit({"name": "fantasy"})

    assert second == first
    listed = (await genres.list_records()).data["genre_list"]
    assert [g.name for g in listed] == ["Fantasy"]
    assert await store.count(Genre) == 1


@pytest.mark.asyncio
async def test_short_genre_name_is_created(genres, store):
    genre_id = await create(genres, {"name": "SF"})
    assert (await store.find_by_id(Genre, genre_id)).name == "SF"


@pytest.mark.asyncio
async def test_escaped_text_fits_its_column(genres, store):
    limit = Genre.__table__.c.name.type.length

    outcome = await genres.create_submit({"name": "Sci & Fi " + "x" * 90})
    assert isinstance(outcome, Render)
    assert [e.param for e in outcome.data["errors"]] == ["name"]
    assert await store.count(Genre) == 0

    genre_id = await create(genres, {"name": "Sci & Fi " + "x" * 86})
    stored = (await store.find_by_id(Genre, genre_id)).name
    assert "&amp;" in stored
    assert len(stored) <= limit


@pytest.mark.asyncio
async def test_genre_update_rejects_duplicate_name(genres):
    await create(genres, {"name": "Fantasy"})
    poetry_id = await create(genres, {"name": "Poetry"})

    outcome = await genres.update_submit(poetry_id, {"name": "Fantasy"})
    assert isinstance(outcome, Render)
    assert [e.param for e in outcome.data["errors"]] == ["name"]


@pytest.mark.asyncio
async def test_create_form_loads_reference_lists(authors, genres, books):
    await create(authors, JANE)
    await create(genres, {"name": "Romance"})

    outcome = await books.create_form()
    assert outcome.view == "book_form"
    assert outcome.data["title"] == "Create Book"
    assert [a.name for a in outcome.data["authors"]] == ["Austen, Jane"]
    assert [g.name for g in outcome.data["genres"]] == ["Romance"]
    assert outcome.data["selected"] == {"authors": set(), "genres": set()}


@pytest.mark.asyncio
async def test_book_with_genres(authors, genres, books):
    romance = await create(genres, {"name": "Romance"})
    classic = await create(genres, {"name": "Classic"})
    author_id, book_id = await create_book(authors, books, [romance, classic])

    outcome = await books.detail(book_id)
    book = outcome.data["book"]
    assert outcome.data["title"] == "Emma"
    assert book.author.id == author_id
    assert [g.name for g in book.genres] == ["Classic", "Romance"]
    assert outcome.data["book_instances"] == []

    outcome = await genres.detail(romance)
    assert [b.title for b in outcome.data["genre_books"]] == ["Emma"]


@pytest.mark.asyncio
async def test_book_with_unknown_author_is_rejected(books, store):
    outcome = await books.create_submit(
        {"title": "Emma", "author": "42", "summary": "x", "isbn": "1"}
    )
    assert isinstance(outcome, Render)
    assert [(e.param, e.msg) for e in outcome.data["errors"]] == [("author", "Author not found.")]
    assert await store.count(Book) == 0


@pytest.mark.asyncio
async def test_reference_check_can_be_disabled(authors, books, settings):
    settings.check_references = False
    outcome = await books.create_submit(
        {"title": "Emma", "author": "42", "summary": "x", "isbn": "1"}
    )
    assert isinstance(outcome, Redirect)


@pytest.mark.asyncio
async def test_author_delete_blocked_by_book(authors, books, store):
    author_id, book_id = await create_book(authors, books)

    outcome = await authors.delete_form(author_id)
    assert outcome.view == "author_delete"
    assert [b.id for b in outcome.data["author_books"]] == [book_id]

    outcome = await authors.delete_submit(author_id)
    assert isinstance(outcome, Render)
    assert outcome.view == "author_delete"
    assert await store.find_by_id(Author, author_id) is not None


@pytest.mark.asyncio
async def test_delete_without_dependents(authors, books, store):
    author_id, book_id = await create_book(authors, books)

    assert await books.delete_submit(book_id) == Redirect("/catalog/books")
    assert await authors.delete_submit(author_id) == Redirect("/catalog/authors")
    assert await store.count(Author) == 0


@pytest.mark.asyncio
async def test_delete_missing_record_redirects(genres, copies):
    assert await genres.delete_form(123) == Redirect("/catalog/genres")
    assert await genres.delete_submit(123) == Redirect("/catalog/genres")
    assert await copies.delete_submit(5) == Redirect("/catalog/bookinstances")


@pytest.mark.asyncio
async def test_genre_delete_blocked_by_book(authors, genres, books, store):
    fantasy = await create(genres, {"name": "Fantasy"})
    await create_book(authors, books, [fantasy])

    outcome = await genres.delete_submit(fantasy)
    assert isinstance(outcome, Render)
    assert len(outcome.data["genre_books"]) == 1
    assert await store.count(Genre) == 1


@pytest.mark.asyncio
async def test_guarded_delete_rechecks_dependents(authors, books, store):
    author_id, _ = await create_book(authors, books)

    blocking = await store.delete_unreferenced(
        Author, author_id, (Book, Book.author_id == author_id)
    )
    assert [b.title for b in blocking] == ["Emma"]
    assert await store.count(Author) == 1


@pytest.mark.asyncio
async def test_update_form_preselects_references(authors, genres, books):
    romance = await create(genres, {"name": "Romance"})
    await create(genres, {"name": "Satire"})
    author_id, book_id = await create_book(authors, books, [romance])

    outcome = await books.update_form(book_id)
    assert outcome.data["title"] == "Update Book"
    assert outcome.data["book"].id == book_id
    assert outcome.data["selected"] == {"authors": {author_id}, "genres": {romance}}


@pytest.mark.asyncio
async def test_update_form_missing_record(authors):
    with pytest.raises(NotFoundError):
        await authors.update_form(77)


@pytest.mark.asyncio
async def test_update_keeps_identifier(authors, store):
    author_id = await create(authors, JANE)

    outcome = await authors.update_submit(
        author_id, {"first_name": "Jane", "family_name": "Austin", "date_of_birth": ""}
    )
    assert outcome == Redirect(f"/catalog/author/{author_id}")
    author = await store.find_by_id(Author, author_id)
    assert author.family_name == "Austin"
    assert author.date_of_birth is None
    assert await store.count(Author) == 1


@pytest.mark.asyncio
async def test_invalid_update_leaves_record(authors, store):
    author_id = await create(authors, JANE)

    outcome = await authors.update_submit(author_id, {"first_name": "", "family_name": ""})
    assert isinstance(outcome, Render)
    assert outcome.data["author"].id == author_id
    assert len(outcome.data["errors"]) == 2
    assert (await store.find_by_id(Author, author_id)).family_name == "Austen"


@pytest.mark.asyncio
async def test_update_vanished_record(genres):
    with pytest.raises(NotFoundError):
        await genres.update_submit(31, {"name": "Horror"})


@pytest.mark.asyncio
async def test_book_update_replaces_genres(authors, genres, books, store):
    romance = await create(genres, {"name": "Romance"})
    satire = await create(genres, {"name": "Satire"})
    author_id, book_id = await create_book(authors, books, [romance])

    await books.update_submit(book_id, {
        "title": "Emma",
        "author": str(author_id),
        "summary": "Revised.",
        "isbn": "9780141439587",
        "genre": str(satire),
    })
    book = await store.find_by_id(Book, book_id)
    assert book.genre_ids == [satire]
    assert book.summary == "Revised."


@pytest.mark.asyncio
async def test_copies_of_a_book(authors, books, copies, store):
    _, book_id = await create_book(authors, books)
    copy_id = await create(copies, {"book": str(book_id), "imprint": "Penguin", "status": "Available"})

    outcome = await copies.detail(copy_id)
    assert outcome.data["title"] == "Copy: Emma"
    assert outcome.data["bookinstance"].book.id == book_id

    outcome = await books.delete_submit(book_id)
    assert isinstance(outcome, Render)
    assert [c.id for c in outcome.data["book_instances"]] == [copy_id]

    assert await copies.delete_submit(copy_id) == Redirect("/catalog/bookinstances")
    assert await store.count(BookInstance) == 0
