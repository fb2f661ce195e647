"""Render-invoke-validate service for Blender-built 3D models."""

__version__ = "0.1.0"
