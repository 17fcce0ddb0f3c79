"""
Diff endpoints.

Compute change records between two versions of a document described by
a registered type descriptor. No persistence - computation only.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from app.catalog import catalog, sample_collections
from src.object_diff import (
    ChangeRecord,
    DataShapeError,
    ReconciliationError,
    __engine_version__,
    create_change_record,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---

class DiffRequest(BaseModel):
    """
    Request body for a diff computation.

    Both versions must be shaped like the type the chosen descriptor
    describes; complex properties must be arrays (or null on both sides).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "from": {"cars": [{"id": "car_1", "msrp": 15000}]},
                "to": {"cars": [{"id": "car_1", "msrp": 16000}]},
            }
        },
    )

    from_: dict[str, Any] = Field(
        ...,
        alias="from",
        description="Old version of the document"
    )
    to: dict[str, Any] = Field(
        ...,
        description="New version of the document"
    )


class DescriptorListResponse(BaseModel):
    """Registered descriptors."""

    engine_version: str = Field(description="Diff engine version")
    descriptors: list[str] = Field(description="Registered descriptor names")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")
    detail: Any = Field(default=None, description="Additional error details")


# --- Endpoints ---

@router.get("/descriptors", response_model=DescriptorListResponse)
async def list_descriptors() -> DescriptorListResponse:
    """List the descriptors documents can be diffed against."""
    return DescriptorListResponse(
        engine_version=__engine_version__,
        descriptors=catalog.names(),
    )


@router.get("/example", response_model=ChangeRecord)
async def diff_example() -> ChangeRecord:
    """Diff the bundled sample inventory versions."""
    before, after = sample_collections()
    return create_change_record(before, after, catalog.get("AutomobileCollection"))


@router.post(
    "/{descriptor_name}",
    response_model=ChangeRecord,
    responses={
        200: {"description": "Diff computed"},
        404: {"model": ErrorResponse, "description": "Unknown descriptor"},
        422: {"model": ErrorResponse, "description": "Data shape error"},
        500: {"model": ErrorResponse, "description": "Reconciliation error"},
    },
    summary="Diff two document versions",
)
async def compute_document_diff(descriptor_name: str, request: DiffRequest) -> ChangeRecord:
    """
    Compute a sparse change record between two document versions.

    Array elements are matched by primary key. Removed and added elements
    appear as full snapshots; matched elements that changed appear as
    their primary key plus the changed properties only.
    """
    if descriptor_name not in catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "unknown_descriptor",
                "message": f"Unknown descriptor: {descriptor_name}",
                "detail": catalog.names(),
            },
        )

    logger.info(
        "Computing diff | engine=%s descriptor=%s",
        __engine_version__,
        descriptor_name,
    )

    try:
        record = create_change_record(
            request.from_,
            request.to,
            catalog.get(descriptor_name),
            log=logger,
        )
    except DataShapeError as e:
        logger.error("Data shape error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "data_shape_error", "message": str(e), "detail": e.path},
        )
    except ReconciliationError as e:
        logger.exception("Reconciliation error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "reconciliation_error", "message": str(e)},
        )

    logger.info(
        "Diff complete | descriptor=%s has_changes=%s",
        descriptor_name,
        record.has_changes,
    )

    return record
