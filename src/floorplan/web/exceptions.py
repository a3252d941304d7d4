"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from floorplan.infrastructure import PlanImportError


class RoomNotFoundError(Exception):
    """Raised when a stored room id does not exist."""

    def __init__(self, room_id: int) -> None:
        self.room_id = room_id
        super().__init__(f"Room not found: {room_id}")


class UnsupportedFormatError(Exception):
    """Raised when requested export format is not supported."""

    def __init__(self, format_name: str, available: list[str]) -> None:
        self.format_name = format_name
        self.available = available
        super().__init__(
            f"Unsupported format: {format_name}. Available: {', '.join(available)}"
        )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(PlanImportError)
    async def plan_import_error_handler(
        request: Request, exc: PlanImportError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details,
            },
        )

    @app.exception_handler(RoomNotFoundError)
    async def room_not_found_handler(
        request: Request, exc: RoomNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": "Room not found",
                "error_type": "not_found",
                "details": {"id": exc.room_id},
            },
        )

    @app.exception_handler(UnsupportedFormatError)
    async def unsupported_format_handler(
        request: Request, exc: UnsupportedFormatError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "unsupported_format",
                "details": {"format": exc.format_name, "available": exc.available},
            },
        )
