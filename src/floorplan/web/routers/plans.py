"""projectData import, normalization and export endpoints."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response

from floorplan.infrastructure.exporters import ExporterRegistry
from floorplan.web.dependencies import PlanSerializerDep, ServiceFactoryDep
from floorplan.web.exceptions import UnsupportedFormatError
from floorplan.web.schemas.requests import PlanRequest
from floorplan.web.schemas.responses import (
    ErrorResponseSchema,
    ExportFormatsSchema,
    PlanSummarySchema,
)

IMPORT_ERROR = {422: {"model": ErrorResponseSchema}}

router = APIRouter(prefix="/plans", tags=["plans"])

MEDIA_TYPES = {
    "json": "application/json",
    "dxf": "application/dxf",
}


@router.post("/normalize", responses=IMPORT_ERROR)
async def normalize_plan(
    request: PlanRequest, serializer: PlanSerializerDep
) -> dict[str, Any]:
    """Import a projectData document and return its normalized export.

    Rooms come back clockwise with doors, windows and snapped runs remapped
    onto the renumbered walls.
    """
    plan = serializer.import_dict(request.project_data)
    return serializer.export_dict(plan)


@router.post("/summary", response_model=PlanSummarySchema, responses=IMPORT_ERROR)
async def summarize_plan(
    request: PlanRequest,
    serializer: PlanSerializerDep,
    factory: ServiceFactoryDep,
) -> PlanSummarySchema:
    """Import a projectData document and describe its rooms and runs."""
    plan = serializer.import_dict(request.project_data)
    return PlanSummarySchema(
        room_count=len(plan.rooms),
        run_count=len(plan.cabinet_runs),
        cabinet_count=len(plan.cabinets),
        summary=factory.get_summary_formatter().format(plan),
    )


@router.get("/formats", response_model=ExportFormatsSchema)
async def list_export_formats() -> ExportFormatsSchema:
    """List all available export formats."""
    return ExportFormatsSchema(formats=ExporterRegistry.available_formats())


@router.post(
    "/export/{format_name}",
    responses={400: {"model": ErrorResponseSchema}, **IMPORT_ERROR},
)
async def export_plan(
    format_name: str,
    request: PlanRequest,
    factory: ServiceFactoryDep,
) -> Response:
    """Import a projectData document and export it in the given format.

    Raises:
        UnsupportedFormatError: If the format is not registered (400).
    """
    if not ExporterRegistry.is_registered(format_name):
        raise UnsupportedFormatError(format_name, ExporterRegistry.available_formats())

    manager = factory.get_export_manager()
    plan = manager.serializer.import_dict(request.project_data)
    exporter = manager.create_exporter(format_name)
    return Response(
        content=exporter.export_string(plan),
        media_type=MEDIA_TYPES.get(format_name, "application/octet-stream"),
        headers={
            "Content-Disposition": (
                f'attachment; filename="plan.{exporter.file_extension}"'
            )
        },
    )
