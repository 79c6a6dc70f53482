from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Query
from fastapi.responses import Response

from api.errors import to_api_error
from api.schemas import (
    ColumnsResponse,
    ConnectRequest,
    ConnectResponse,
    DeleteRequest,
    DeleteResponse,
    ErrorResponse,
    InsertResponse,
    StatusResponse,
    TableDataResponse,
    UpdateResponse,
)
from gateway.dispatcher import Dispatcher
from gateway.registry import ConnectionRegistry

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

registry = ConnectionRegistry()
dispatcher = Dispatcher(registry)


@router.get("/", response_model=StatusResponse)
def root() -> StatusResponse:
    return StatusResponse(status="ok", message="Backend is running")


@router.post("/connect", response_model=ConnectResponse, responses=ERROR_RESPONSES)
def connect(request: ConnectRequest) -> ConnectResponse:
    config = request.to_config()
    try:
        tables = registry.connect(config)
    except Exception as exc:
        raise to_api_error(exc, "Failed to connect to database", context=config.engine_type) from exc
    return ConnectResponse(status="connected", tables=tables)


@router.get("/columns/{table}", response_model=ColumnsResponse, responses=ERROR_RESPONSES)
def get_columns(table: str) -> ColumnsResponse:
    try:
        columns = dispatcher.get_columns(table)
    except Exception as exc:
        raise to_api_error(exc, "Failed to fetch columns", context=table) from exc
    return ColumnsResponse(columns=columns)


@router.post("/data/{table}", response_model=InsertResponse, responses=ERROR_RESPONSES)
def insert_row(table: str, row: Dict[str, Any] = Body(...)) -> InsertResponse:
    try:
        inserted_id = dispatcher.insert_row(table, row)
    except Exception as exc:
        raise to_api_error(exc, "Failed to insert row", context=table) from exc
    return InsertResponse(success=True, insertedId=inserted_id)


@router.put("/data/{table}/{record_id}", response_model=UpdateResponse, responses=ERROR_RESPONSES)
def update_row(table: str, record_id: str, row: Dict[str, Any] = Body(...)) -> UpdateResponse:
    try:
        dispatcher.update_row(table, record_id, row)
    except Exception as exc:
        raise to_api_error(exc, "Failed to update row", context=f"{table}/{record_id}") from exc
    return UpdateResponse(success=True)


@router.delete("/data/{table}", response_model=DeleteResponse, responses=ERROR_RESPONSES)
def delete_rows(table: str, request: Optional[DeleteRequest] = None) -> DeleteResponse:
    ids = request.ids if request else None
    try:
        deleted = dispatcher.delete_rows(table, ids)
    except Exception as exc:
        raise to_api_error(exc, "Failed to delete rows", context=table) from exc
    return DeleteResponse(success=True, deletedCount=deleted)


@router.get("/data/{table}", response_model=TableDataResponse, responses=ERROR_RESPONSES)
def get_table_data(
    table: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    skip: Optional[str] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    search: Optional[str] = None,
    filters: Optional[str] = None,
) -> TableDataResponse:
    params = {
        "limit": limit,
        "offset": offset,
        "skip": skip,
        "sort": sort,
        "order": order,
        "search": search,
        "filters": filters,
    }
    try:
        result = dispatcher.list_rows(table, params)
    except Exception as exc:
        raise to_api_error(exc, "Failed to fetch table data", context=table) from exc
    return TableDataResponse(**result)


@router.get("/export/{table}", responses=ERROR_RESPONSES)
def export_table(table: str, export_format: str = Query(default="json", alias="format")) -> Response:
    try:
        body, media_type = dispatcher.export_table(table, export_format)
    except Exception as exc:
        raise to_api_error(exc, "Failed to export data", context=table) from exc
    extension = "csv" if media_type == "text/csv" else "json"
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{table}.{extension}"'},
    )
