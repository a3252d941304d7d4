"""Application layer - edit operations, settings and orchestration."""

from .commands import PlanEditor
from .dtos import EditResult
from .factory import ServiceFactory, get_factory, reset_factory, set_factory

__all__ = [
    "EditResult",
    "PlanEditor",
    "ServiceFactory",
    "get_factory",
    "reset_factory",
    "set_factory",
]
