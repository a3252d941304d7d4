"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from floorplan.application.config import EngineSettings

if TYPE_CHECKING:
    from floorplan.application.commands import PlanEditor
    from floorplan.domain import Plan
    from floorplan.domain.services import (
        AttachmentService,
        CabinetLayoutService,
        CabinetSnapService,
        RoomEditingService,
        WallFeatureService,
    )
    from floorplan.infrastructure.exporters import ExportManager
    from floorplan.infrastructure.formatters import RoomSummaryFormatter
    from floorplan.infrastructure.plan_serializer import PlanSerializer


@dataclass
class ServiceFactory:
    """Factory for creating service instances from engine settings.

    Domain services are stateless apart from their settings, so they are
    created lazily and shared. Editors carry interaction state and are
    created fresh for every plan.

    Example:
        ```python
        factory = ServiceFactory(load_settings(Path("floorplan.json")))
        editor = factory.create_editor()
        editor.apply(AddPoint("main", 0, 0))
        ```
    """

    settings: EngineSettings = field(default_factory=EngineSettings)

    _attachments: "AttachmentService | None" = field(default=None, init=False, repr=False)
    _room_editing: "RoomEditingService | None" = field(default=None, init=False, repr=False)
    _wall_features: "WallFeatureService | None" = field(default=None, init=False, repr=False)
    _snapping: "CabinetSnapService | None" = field(default=None, init=False, repr=False)
    _layout: "CabinetLayoutService | None" = field(default=None, init=False, repr=False)

    def get_attachment_service(self) -> "AttachmentService":
        """Get or create the attachment service."""
        if self._attachments is None:
            from floorplan.domain.services import AttachmentService

            self._attachments = AttachmentService()
        return self._attachments

    def get_room_editing_service(self) -> "RoomEditingService":
        """Get or create the room editing service."""
        if self._room_editing is None:
            from floorplan.domain.services import RoomEditingService

            self._room_editing = RoomEditingService(
                self.get_attachment_service(),
                snap_tolerance=self.settings.snapping.point_snap_tolerance,
            )
        return self._room_editing

    def get_wall_feature_service(self) -> "WallFeatureService":
        """Get or create the door/window service."""
        if self._wall_features is None:
            from floorplan.domain.services import FeatureDefaults, WallFeatureService

            f = self.settings.features
            self._wall_features = WallFeatureService(
                FeatureDefaults(
                    door_height=f.door_height,
                    door_frame_thickness=f.door_frame_thickness,
                    door_frame_width=f.door_frame_width,
                    door_material=f.door_material,
                    window_height=f.window_height,
                    window_sill_height=f.window_sill_height,
                    window_type=f.window_type,
                ),
                snap_tolerance=self.settings.snapping.point_snap_tolerance,
            )
        return self._wall_features

    def get_snap_service(self) -> "CabinetSnapService":
        """Get or create the cabinet run snap service."""
        if self._snapping is None:
            from floorplan.domain.services import CabinetSnapService

            s = self.settings.snapping
            self._snapping = CabinetSnapService(
                snap_threshold=s.wall_snap_threshold,
                distance_epsilon=s.distance_epsilon,
            )
        return self._snapping

    def get_layout_service(self) -> "CabinetLayoutService":
        """Get or create the cabinet layout service."""
        if self._layout is None:
            from floorplan.domain.services import (
                CabinetLayoutService,
                CabinetTypeRule,
                CabinetWidthPolicy,
            )

            c = self.settings.cabinets
            policy = CabinetWidthPolicy(
                rules={
                    name: CabinetTypeRule(fixed_width=t.fixed_width, min_width=t.min_width)
                    for name, t in c.cabinet_types.items()
                },
                default_min_width=c.default_min_width,
            )
            self._layout = CabinetLayoutService(
                policy,
                filler_width=c.filler_width,
                base_depth=c.default_base_depth,
                upper_depth=c.default_upper_depth,
            )
        return self._layout

    def create_editor(self, plan: "Plan | None" = None) -> "PlanEditor":
        """Create an editor for `plan` (a new plan when omitted)."""
        from floorplan.application.commands import PlanEditor

        return PlanEditor(
            plan,
            attachments=self.get_attachment_service(),
            room_editing=self.get_room_editing_service(),
            wall_features=self.get_wall_feature_service(),
            snapping=self.get_snap_service(),
            layout=self.get_layout_service(),
            jitter_threshold=self.settings.snapping.drag_jitter_threshold,
        )

    def get_plan_serializer(self) -> "PlanSerializer":
        """Create a projectData serializer using the export settings."""
        from floorplan.infrastructure.plan_serializer import PlanSerializer

        return PlanSerializer(
            python_style_booleans=self.settings.export.python_style_booleans,
            indent=self.settings.export.indent,
            feature_defaults=self.get_wall_feature_service().defaults,
        )

    def get_export_manager(self) -> "ExportManager":
        """Create an export manager bound to this factory's serializer."""
        from floorplan.infrastructure.exporters import ExportManager

        return ExportManager(serializer=self.get_plan_serializer())

    def get_summary_formatter(self) -> "RoomSummaryFormatter":
        """Create the text summary formatter."""
        from floorplan.infrastructure.formatters import RoomSummaryFormatter

        return RoomSummaryFormatter()


_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
