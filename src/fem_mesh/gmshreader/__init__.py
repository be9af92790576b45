# -*- coding: utf-8 -*-
"""
This package reads finite element meshes written in the Gmsh ASCII format.

Key modules:
- element_types: The element type ids of the format and their node counts.
- mesh_data:     Decoded mesh containers (elements, ownership, interfaces).
- reader:        The section based reader for ``.msh`` files.
- exceptions:    Errors raised while reading.
"""

from .element_types import ElementType, element_type, node_count
from .exceptions import (
    GmshReaderError,
    MalformedSectionError,
    MeshFileError,
    UnknownElementTypeError,
    UnsupportedVersionError,
)
from .mesh_data import Element, GmshMesh, InterfaceAccumulator, Owned, Shared
from .reader import GmshReader, parse_gmsh, read_gmsh

__all__ = [
    "ElementType",
    "element_type",
    "node_count",
    "GmshReaderError",
    "MalformedSectionError",
    "MeshFileError",
    "UnknownElementTypeError",
    "UnsupportedVersionError",
    "Element",
    "GmshMesh",
    "InterfaceAccumulator",
    "Owned",
    "Shared",
    "GmshReader",
    "parse_gmsh",
    "read_gmsh",
]
