"""
Фабрика роутера для вида записи: /api/research/{slug}.

GET    ""          список с фильтрами и пагинацией (аноним видит только публичное)
POST   ""          создание
DELETE ""          массовое удаление {ids}
GET    "/export"   CSV по тем же фильтрам, без пагинации
GET    "/stats"    сводная статистика
GET    "/{id}"     одна запись
PATCH  "/{id}"     частичное обновление
DELETE "/{id}"     удаление
"""
import logging
import math

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from app.db.session import get_db
from app.modules.auth.caller import Caller
from app.modules.auth.router import get_current_caller, get_optional_caller
from app.modules.research import crud
from app.modules.research.csv_export import export_filename, to_csv
from app.modules.research.enums import UserRole
from app.modules.research.filters import build_predicate, parse_filters
from app.modules.research.predicate import evaluate
from app.modules.research.registry import ResourceSpec
from app.modules.research.schemas import BulkDeleteRequest, BulkDeleteResponse, MessageResponse, Pagination
from app.modules.research.scope import ScopePolicy, resolve_scope
from app.modules.research.stats import compute_stats
from app.modules.research.validators import validate_create, validate_update

logger = logging.getLogger(__name__)


async def require_editor(
    caller: Caller | None = Depends(get_optional_caller),
) -> Caller:
    """
    Удалять могут только ADMIN и FACULTY.
    Dependency выполняется до разбора тела, поэтому STUDENT получает 403 при любом теле.
    """
    if caller is None or caller.role == UserRole.STUDENT:
        raise ForbiddenError("Forbidden - Admin or Faculty access required")
    return caller


def build_router(spec: ResourceSpec) -> APIRouter:
    router = APIRouter(prefix=f"/api/research/{spec.slug}", tags=[spec.slug])
    create_schema = spec.create_schema
    update_schema = spec.update_schema

    def _dump(record) -> dict:
        return spec.out_schema.model_validate(record).model_dump(mode="json", by_alias=True)

    @router.get("")
    async def list_records(
        request: Request,
        page: int = Query(1, ge=1),
        limit: int | None = Query(None, ge=1),
        sort_by: str = Query("createdAt", alias="sortBy"),
        sort_order: str = Query("desc", alias="sortOrder"),
        db: AsyncSession = Depends(get_db),
        caller: Caller | None = Depends(get_optional_caller),
    ) -> dict:
        settings = get_settings()
        limit = limit or settings.RESEARCH_DEFAULT_PAGE_SIZE
        if limit > settings.RESEARCH_MAX_PAGE_SIZE:
            raise ValidationError(f"limit must not exceed {settings.RESEARCH_MAX_PAGE_SIZE}")
        filters = parse_filters(spec, request.query_params)
        predicate = build_predicate(resolve_scope(caller, spec.list_policy), filters, spec)
        rows, total = await crud.list_records(db, spec, predicate, page, limit, sort_by, sort_order)
        pagination = Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )
        return {
            spec.plural: [_dump(r) for r in rows],
            "pagination": pagination.model_dump(by_alias=True),
        }

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(
        payload: create_schema,  # type: ignore[valid-type]
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(get_current_caller),
    ) -> dict:
        data = await validate_create(db, spec, payload)
        record = await crud.create_record(db, spec, data)
        logger.info("%s %s created by %s", spec.label.capitalize(), record.id, caller.id)
        return {spec.singular: _dump(record)}

    @router.delete("", response_model=BulkDeleteResponse)
    async def bulk_delete(
        body: BulkDeleteRequest | None = None,
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(require_editor),
    ) -> BulkDeleteResponse:
        if body is None or not body.ids:
            raise ValidationError("IDs array is required")
        count = await crud.bulk_delete(db, spec, body.ids)
        logger.info("Bulk delete of %s: %s of %s removed by %s", spec.plural, count, len(body.ids), caller.id)
        return BulkDeleteResponse(
            message=f"Successfully deleted {count} {spec.label}(s)",
            count=count,
        )

    @router.get("/export")
    async def export_records(
        request: Request,
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(get_current_caller),
    ) -> Response:
        filters = parse_filters(spec, request.query_params)
        predicate = build_predicate(resolve_scope(caller, spec.list_policy), filters, spec)
        rows = await crud.fetch_all(db, spec, predicate)
        csv_body = to_csv(rows, spec.csv_columns)
        logger.info("Export of %s %s by %s", len(rows), spec.plural, caller.id)
        return Response(
            content=csv_body,
            media_type="text/csv; charset=utf-8",
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename(spec.plural)}"',
            },
        )

    @router.get("/stats")
    async def stats(
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(get_current_caller),
    ) -> JSONResponse:
        return JSONResponse(await compute_stats(db, spec, caller))

    async def _load(db: AsyncSession, record_id: str):
        record = await crud.get_record(db, spec, record_id)
        if record is None:
            raise NotFoundError(f"{spec.label.capitalize()} not found")
        return record

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        caller: Caller | None = Depends(get_optional_caller),
    ) -> dict:
        record = await _load(db, record_id)
        if not evaluate(resolve_scope(caller, ScopePolicy.PUBLIC_OR_AUTHORED), record):
            if caller is None:
                raise UnauthorizedError("Not authenticated")
            raise ForbiddenError(f"Access to this {spec.label} is not allowed")
        return {spec.singular: _dump(record)}

    @router.patch("/{record_id}")
    async def update_record(
        record_id: str,
        payload: update_schema,  # type: ignore[valid-type]
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(get_current_caller),
    ) -> dict:
        record = await _load(db, record_id)
        data = await validate_update(db, spec, record, payload)
        record = await crud.update_record(db, spec, record, data)
        logger.info("%s %s updated by %s", spec.label.capitalize(), record.id, caller.id)
        return {spec.singular: _dump(record)}

    @router.delete("/{record_id}", response_model=MessageResponse)
    async def delete_record(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        caller: Caller = Depends(require_editor),
    ) -> MessageResponse:
        record = await _load(db, record_id)
        await crud.delete_record(db, spec, record)
        logger.info("%s %s deleted by %s", spec.label.capitalize(), record_id, caller.id)
        return MessageResponse(message=f"{spec.label.capitalize()} deleted successfully")

    return router
