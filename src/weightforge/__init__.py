"""Bone weight partition editing for skinned meshes."""

__version__ = "0.1.0"
