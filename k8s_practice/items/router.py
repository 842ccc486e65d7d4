"""Item API endpoints."""

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from k8s_practice.core.dependencies import OptionalSession
from k8s_practice.core.exceptions import BadRequestError, DatabaseError
from k8s_practice.db.session import describe_db_error
from k8s_practice.items.schemas import ItemCreate, ItemCreated, ItemList, ItemResponse
from k8s_practice.items.service import ItemService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data", tags=["items"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

_ITEM_BODY_SCHEMA = ItemCreate.model_json_schema()


async def read_item_payload(request: Request) -> ItemCreate:
    """Parse the creation body from JSON or an HTML form.

    An empty body is treated as an empty object.
    """
    content_type = request.headers.get("content-type", "")
    raw: Any
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        raw = dict(form)
    else:
        body = await request.body()
        if not body:
            return ItemCreate()
        try:
            raw = json.loads(body)
        except ValueError as e:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": str(e)}]
            ) from e

    try:
        return ItemCreate.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.get(
    "",
    response_model=ItemList,
    summary="List recent items",
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Query failed"}},
)
async def list_items(db: OptionalSession) -> ItemList:
    """List the ten most recent items, or mock data without a database."""
    if db is None:
        return ItemList(
            message="Database not enabled. Using mock data.",
            data=ItemService.mock_items(),
        )

    try:
        items = await ItemService.get_recent(db)
    except SQLAlchemyError as e:
        logger.error("Database query error: %s", e)
        raise DatabaseError("Database query failed", describe_db_error(e)) from e

    return ItemList(
        message="Data retrieved from database",
        data=[ItemResponse.model_validate(item) for item in items],
    )


@router.post(
    "",
    response_model=ItemCreated,
    summary="Create an item",
    responses={
        status.HTTP_201_CREATED: {"description": "Item persisted"},
        status.HTTP_400_BAD_REQUEST: {"description": "Name is missing"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Insert failed"},
    },
    openapi_extra={
        "requestBody": {
            "content": {
                content_type: {"schema": _ITEM_BODY_SCHEMA}
                for content_type in ("application/json", FORM_CONTENT_TYPES[0])
            }
        }
    },
)
async def create_item(
    response: Response,
    db: OptionalSession,
    data: Annotated[ItemCreate, Depends(read_item_payload)],
) -> ItemCreated:
    """Create a new item.

    Returns 201 when the item was persisted and 200 when the database is
    disabled and the item was only synthesized.
    """
    name = data.name
    if not name:
        raise BadRequestError("Name is required")

    if db is None:
        return ItemCreated(
            message="Database not enabled. Item not persisted.",
            item=ItemService.synthesize(name),
        )

    try:
        item = await ItemService.create(db, name)
    except SQLAlchemyError as e:
        logger.error("Database insert error: %s", e)
        raise DatabaseError("Failed to create item", describe_db_error(e)) from e

    response.status_code = status.HTTP_201_CREATED
    return ItemCreated(
        message="Item created successfully",
        item=ItemResponse.model_validate(item),
    )
