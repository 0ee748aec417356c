"""Generic catalog manager: list/detail/create/delete/update for one record type.

The four record types differ only in their ``EntityType`` descriptor (model,
form schema, ordering, dependents, reference lists, uniqueness key). Every
operation returns exactly one ``Render`` or ``Redirect``.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from sqlalchemy import ColumnElement, func, inspect

from locallibrary.config import Settings, get_settings
from locallibrary.core.exceptions import NotFoundError
from locallibrary.core.logging import get_logger
from locallibrary.database import Base
from locallibrary.schemas.common import FieldError
from locallibrary.schemas.forms import RecordForm
from locallibrary.services.outcomes import Outcome, Redirect, Render
from locallibrary.store import Store

logger = get_logger("catalog")


@dataclass(frozen=True)
class Dependent:
    """Records of another type that reference the managed record."""

    key: str
    model: type[Base]
    criterion: Callable[[int], ColumnElement[bool]]
    order_by: Optional[Any] = None


@dataclass(frozen=True)
class Reference:
    """Selectable records offered by the create/update form."""

    key: str
    model: type[Base]
    field: str
    param: str
    missing_message: str
    order_by: Optional[Any] = None


@dataclass(frozen=True)
class EntityType:
    """Everything that distinguishes one catalog record type from another."""

    name: str
    label: str
    model: type[Base]
    form: type[RecordForm]
    list_url: str
    list_title: str
    detail_title: Callable[[Any], str]
    order_by: Optional[Any] = None
    dependents: tuple[Dependent, ...] = ()
    references: tuple[Reference, ...] = ()
    unique_field: Optional[str] = None
    unique_message: str = ""

    @property
    def list_view(self) -> str:
        return f"{self.name}_list"

    @property
    def detail_view(self) -> str:
        return f"{self.name}_detail"

    @property
    def form_view(self) -> str:
        return f"{self.name}_form"

    @property
    def delete_view(self) -> str:
        return f"{self.name}_delete"


def selected_ids(value: Any) -> set[int]:
    """IDs named by a reference attribute: an ID, a list of IDs or of records."""
    if value is None:
        return set()
    if isinstance(value, (list, tuple, set)):
        return {getattr(item, "id", item) for item in value}
    return {getattr(value, "id", value)}


class EntityManager:
    """Catalog operations for one record type."""

    def __init__(
        self,
        entity: EntityType,
        store: Store,
        settings: Optional[Settings] = None,
    ):
        self.entity = entity
        self.store = store
        self.settings = settings or get_settings()

    async def list_records(self) -> Render:
        """All records in display order."""
        records = await self.store.find_all(
            self.entity.model, order_by=self.entity.order_by
        )
        return Render(
            self.entity.list_view,
            {"title": self.entity.list_title, self.entity.list_view: records},
        )

    async def detail(self, record_id: int) -> Render:
        """One record plus its dependents."""
        record, dependents = await self._load_with_dependents(record_id)
        if record is None:
            raise NotFoundError(self.entity.label, record_id)
        return Render(
            self.entity.detail_view,
            {
                "title": self.entity.detail_title(record),
                self.entity.name: record,
                **dependents,
            },
        )

    async def create_form(self) -> Render:
        """Blank form with the reference lists it needs."""
        references = await self._load_references()
        return self._form(
            f"Create {self.entity.label}",
            self.entity.model(),
            references,
            self._selected(lambda field: None),
        )

    async def create_submit(self, raw: dict[str, Any]) -> Outcome:
        """Validate and insert; re-render the form with every failure otherwise."""
        form, errors = self.entity.form.parse(raw, context=self._context())
        if form is not None:
            values = form.to_values()
            errors = await self._check_references(values)
            if not errors and self.entity.unique_field:
                existing = await self._find_duplicate(values)
                if existing is not None:
                    logger.info(f"{self.entity.label} already exists: {existing!r}")
                    return Redirect(existing.url)
        if errors:
            return await self._rerender(f"Create {self.entity.label}", raw, errors)

        record = await self.store.insert(self.entity.model, values)
        logger.info(f"Created {record!r}")
        return Redirect(record.url)

    async def delete_form(self, record_id: int) -> Outcome:
        """Confirmation page listing anything that blocks the delete."""
        record, dependents = await self._load_with_dependents(record_id)
        if record is None:
            return Redirect(self.entity.list_url)
        return self._delete_page(record, dependents)

    async def delete_submit(self, record_id: int) -> Outcome:
        """Delete the record if, and only if, nothing references it."""
        record, dependents = await self._load_with_dependents(record_id)
        if record is None:
            return Redirect(self.entity.list_url)
        if any(dependents.values()):
            logger.info(f"Delete of {record!r} blocked by dependents")
            return self._delete_page(record, dependents)

        if not self.entity.dependents:
            await self.store.delete_by_id(self.entity.model, record_id)
        else:
            blocking = await self.store.delete_unreferenced(
                self.entity.model,
                record_id,
                *((dep.model, dep.criterion(record_id)) for dep in self.entity.dependents),
            )
            if blocking:
                logger.info(f"Delete of {record!r} blocked by a concurrent write")
                record, dependents = await self._load_with_dependents(record_id)
                if record is None:
                    return Redirect(self.entity.list_url)
                return self._delete_page(record, dependents)

        logger.info(f"Deleted {record!r}")
        return Redirect(self.entity.list_url)

    async def update_form(self, record_id: int) -> Render:
        """Form pre-filled from the record, current references pre-selected."""
        record, references = await asyncio.gather(
            self.store.find_by_id(self.entity.model, record_id),
            self._load_references(),
        )
        if record is None:
            raise NotFoundError(self.entity.label, record_id)
        return self._form(
            f"Update {self.entity.label}",
            record,
            references,
            self._selected(lambda field: getattr(record, field)),
        )

    async def update_submit(self, record_id: int, raw: dict[str, Any]) -> Outcome:
        """Validate and overwrite in place, keeping the record's ID."""
        form, errors = self.entity.form.parse(raw, context=self._context())
        if form is not None:
            values = form.to_values()
            errors = await self._check_references(values)
            if not errors and self.entity.unique_field:
                existing = await self._find_duplicate(values, exclude_id=record_id)
                if existing is not None:
                    errors = [
                        FieldError(
                            param=self.entity.unique_field,
                            msg=self.entity.unique_message,
                            value=values[self.entity.unique_field],
                        )
                    ]
        if errors:
            return await self._rerender(
                f"Update {self.entity.label}", raw, errors, record_id=record_id
            )

        record = await self.store.update_by_id(self.entity.model, record_id, values)
        if record is None:
            raise NotFoundError(self.entity.label, record_id)
        logger.info(f"Updated {record!r}")
        return Redirect(record.url)

    def _context(self) -> dict[str, Any]:
        return {"check_author_lifespan": self.settings.check_author_lifespan}

    async def _load_with_dependents(
        self, record_id: int
    ) -> tuple[Optional[Any], dict[str, list]]:
        record, *found = await asyncio.gather(
            self.store.find_by_id(self.entity.model, record_id),
            *(
                self.store.find_all(
                    dep.model, dep.criterion(record_id), order_by=dep.order_by
                )
                for dep in self.entity.dependents
            ),
        )
        dependents = {
            dep.key: list(records or [])
            for dep, records in zip(self.entity.dependents, found)
        }
        return record, dependents

    async def _load_references(self) -> dict[str, list]:
        found = await asyncio.gather(
            *(
                self.store.find_all(ref.model, order_by=ref.order_by)
                for ref in self.entity.references
            )
        )
        return {ref.key: records for ref, records in zip(self.entity.references, found)}

    def _selected(self, lookup: Callable[[str], Any]) -> dict[str, set[int]]:
        return {ref.key: selected_ids(lookup(ref.field)) for ref in self.entity.references}

    async def _check_references(self, values: dict[str, Any]) -> list[FieldError]:
        """Referenced records must exist (when enabled in settings)."""
        if not self.settings.check_references:
            return []
        checks: list[tuple[Reference, set[int]]] = []
        for ref in self.entity.references:
            ids = selected_ids(values.get(ref.field))
            if ids:
                checks.append((ref, ids))
        counts = await asyncio.gather(
            *(self.store.count(ref.model, ref.model.id.in_(ids)) for ref, ids in checks)
        )
        return [
            FieldError(param=ref.param, msg=ref.missing_message, value=sorted(ids))
            for (ref, ids), count in zip(checks, counts)
            if count != len(ids)
        ]

    async def _find_duplicate(
        self,
        values: dict[str, Any],
        exclude_id: Optional[int] = None,
    ) -> Optional[Any]:
        column = getattr(self.entity.model, self.entity.unique_field)
        criteria = [func.lower(column) == str(values[self.entity.unique_field]).lower()]
        if exclude_id is not None:
            criteria.append(self.entity.model.id != exclude_id)
        found = await self.store.find_all(self.entity.model, *criteria)
        return found[0] if found else None

    async def _rerender(
        self,
        title: str,
        raw: dict[str, Any],
        errors: Iterable[FieldError],
        record_id: Optional[int] = None,
    ) -> Render:
        """Show the rejected form again; nothing is persisted."""
        values = self.entity.form.draft(raw)
        relationships = inspect(self.entity.model).relationships.keys()
        draft = self.entity.model(
            **{key: value for key, value in values.items() if key not in relationships}
        )
        draft.id = record_id
        references = await self._load_references()
        return self._form(
            title,
            draft,
            references,
            self._selected(values.get),
            errors=list(errors),
            submitted=dict(raw),
        )

    def _form(
        self,
        title: str,
        record: Any,
        references: dict[str, list],
        selected: dict[str, set[int]],
        errors: Optional[list[FieldError]] = None,
        submitted: Optional[dict[str, Any]] = None,
    ) -> Render:
        return Render(
            self.entity.form_view,
            {
                "title": title,
                self.entity.name: record,
                **references,
                "selected": selected,
                "errors": errors or [],
                "input": submitted or {},
            },
        )

    def _delete_page(self, record: Any, dependents: dict[str, list]) -> Render:
        return Render(
            self.entity.delete_view,
            {
                "title": f"Delete {self.entity.label}",
                self.entity.name: record,
                **dependents,
            },
        )
