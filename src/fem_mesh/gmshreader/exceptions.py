# -*- coding: utf-8 -*-
"""
Exceptions raised while reading Gmsh mesh files.

All reader failures derive from `GmshReaderError`, so callers can catch a
single type. Every error is fatal for the file being read; the reader never
returns a partially filled mesh.
"""


class GmshReaderError(Exception):
    """Base class for all errors raised by the Gmsh reader."""


class MeshFileError(GmshReaderError):
    """The mesh file is missing or cannot be read."""


class UnsupportedVersionError(GmshReaderError):
    """The MSH format version is outside the supported range."""

    def __init__(self, version: float, minimum: float, maximum: float):
        super().__init__(
            f"Gmsh format version {version} is not supported "
            f"(supported versions are {minimum} <= version < {maximum})."
        )
        self.version = version
        self.minimum = minimum
        self.maximum = maximum


class UnknownElementTypeError(GmshReaderError):
    """The element type id is not part of the topology table."""

    def __init__(self, type_id: int):
        super().__init__(f"The element type id {type_id} is not implemented.")
        self.type_id = type_id


class MalformedSectionError(GmshReaderError):
    """The tokens of a section do not match the expected layout."""

    def __init__(self, section: str, message: str):
        super().__init__(f"Malformed {section} section: {message}")
        self.section = section
