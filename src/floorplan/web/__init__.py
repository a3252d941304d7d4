"""FastAPI REST API for floor plans.

This module provides a REST API for storing room outlines, shaping them for
3D processing, and normalizing and exporting projectData documents.

Usage:
    uvicorn floorplan.web:app --reload
"""

from floorplan.web.app import app, create_app

__all__ = ["app", "create_app"]
