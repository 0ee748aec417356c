"""Catalog routes: the summary page plus list/detail/create/delete/update per record type."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from locallibrary.api.deps import get_store
from locallibrary.api.rendering import read_form, respond
from locallibrary.services import ENTITY_TYPES, EntityManager, EntityType, SummaryService
from locallibrary.store import Store

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("", response_class=HTMLResponse)
async def index(request: Request, store: Store = Depends(get_store)) -> Response:
    """Catalog home page with record counts."""
    return respond(request, await SummaryService(store).index())


def register_entity_routes(router: APIRouter, entity: EntityType) -> None:
    """Add the eight catalog routes for one record type.

    ``/create`` is registered before ``/{record_id}`` so it is not taken
    for an ID.
    """

    def get_manager(store: Store = Depends(get_store)) -> EntityManager:
        return EntityManager(entity, store)

    @router.get(f"/{entity.name}s", response_class=HTMLResponse, name=entity.list_view)
    async def list_records(
        request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.list_records())

    @router.get(f"/{entity.name}/create", response_class=HTMLResponse, name=f"{entity.name}_create")
    async def create_form(
        request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.create_form())

    @router.post(f"/{entity.name}/create", response_class=HTMLResponse, name=f"{entity.name}_create_post")
    async def create_submit(
        request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.create_submit(await read_form(request)))

    @router.get(f"/{entity.name}/{{record_id}}/delete", response_class=HTMLResponse, name=f"{entity.name}_delete")
    async def delete_form(
        record_id: int, request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.delete_form(record_id))

    @router.post(f"/{entity.name}/{{record_id}}/delete", response_class=HTMLResponse, name=f"{entity.name}_delete_post")
    async def delete_submit(
        record_id: int, request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.delete_submit(record_id))

    @router.get(f"/{entity.name}/{{record_id}}/update", response_class=HTMLResponse, name=f"{entity.name}_update")
    async def update_form(
        record_id: int, request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.update_form(record_id))

    @router.post(f"/{entity.name}/{{record_id}}/update", response_class=HTMLResponse, name=f"{entity.name}_update_post")
    async def update_submit(
        record_id: int, request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.update_submit(record_id, await read_form(request)))

    @router.get(f"/{entity.name}/{{record_id}}", response_class=HTMLResponse, name=entity.detail_view)
    async def detail(
        record_id: int, request: Request, manager: EntityManager = Depends(get_manager)
    ) -> Response:
        return respond(request, await manager.detail(record_id))


for entity_type in ENTITY_TYPES:
    register_entity_routes(router, entity_type)
