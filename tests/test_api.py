"""HTTP tests for the catalog routes."""
import pytest
from httpx import AsyncClient

from locallibrary.core.exceptions import StoreError
from locallibrary.store import Store


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["message"].endswith("is running")


@pytest.mark.asyncio
async def test_root_redirects_to_catalog(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/catalog"


@pytest.mark.asyncio
async def test_index_page(client: AsyncClient):
    response = await client.get("/catalog")
    assert response.status_code == 200
    assert "Local Library Home" in response.text
    assert "Copies available:</strong> 0" in response.text


@pytest.mark.asyncio
async def test_create_author_redirects_to_detail(client: AsyncClient):
    response = await client.post(
        "/catalog/author/create",
        data={"first_name": "Jane", "family_name": "Austen", "date_of_birth": "1775-12-16"},
    )
    assert response.status_code == 303
    location = response.headers["location"]
    assert location.startswith("/catalog/author/")

    response = await client.get(location)
    assert response.status_code == 200
    assert "Austen, Jane" in response.text
    assert "This author has no books." in response.text


@pytest.mark.asyncio
async def test_invalid_form_is_rendered_with_errors(client: AsyncClient):
    response = await client.post("/catalog/genre/create", data={"name": "  "})
    assert response.status_code == 200
    assert "Genre name must not be empty." in response.text

    response = await client.get("/catalog/genres")
    assert "There are no genres." in response.text


@pytest.mark.asyncio
async def test_missing_record_is_404(client: AsyncClient):
    response = await client.get("/catalog/book/999")
    assert response.status_code == 404
    assert "Book not found" in response.text

    response = await client.get("/catalog/book/999/update")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_record_redirects_to_list(client: AsyncClient):
    response = await client.post("/catalog/author/999/delete")
    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/authors"


@pytest.mark.asyncio
async def test_book_form_round_trip(client: AsyncClient):
    author = await client.post(
        "/catalog/author/create", data={"first_name": "Jane", "family_name": "Austen"}
    )
    author_id = author.headers["location"].rsplit("/", 1)[-1]
    romance = await client.post("/catalog/genre/create", data={"name": "Romance"})
    classic = await client.post("/catalog/genre/create", data={"name": "Classic"})
    genre_ids = [r.headers["location"].rsplit("/", 1)[-1] for r in (romance, classic)]

    response = await client.post(
        "/catalog/book/create",
        data={
            "title": "Emma",
            "author": author_id,
            "summary": "A comedy of manners.",
            "isbn": "9780141439587",
            "genre": genre_ids,
        },
    )
    assert response.status_code == 303
    book_url = response.headers["location"]

    response = await client.get(f"{book_url}/update")
    assert response.status_code == 200
    assert response.text.count(" checked") == 2
    assert "Update Book" in response.text

    response = await client.get(f"/catalog/author/{author_id}/delete")
    assert "Delete the following books" in response.text
    response = await client.post(f"/catalog/author/{author_id}/delete")
    assert response.status_code == 200
    response = await client.get(f"/catalog/author/{author_id}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_store_failure_renders_error_page(client: AsyncClient, monkeypatch):
    async def broken_find_all(self, model, *criteria, order_by=None):
        raise StoreError("find_all", "connection refused")

    monkeypatch.setattr(Store, "find_all", broken_find_all)
    response = await client.get("/catalog/authors")
    assert response.status_code == 500
