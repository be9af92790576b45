# -*- coding: utf-8 -*-
"""
Reader for the Gmsh ASCII mesh format, MSH versions 2.2 up to (excluding) 3.

The reader is a keyword-driven state machine over the whitespace separated
tokens of the file. Four section markers are recognized:

- ``$MeshFormat``: format version, file type and data size.
- ``$PhysicalNames``: names of the physical groups, one per line.
- ``$Nodes``: node ids and coordinates.
- ``$Elements``: typed elements with their tags and nodal connectivity.

Any other token read between sections (closing ``$End...`` markers, the
content of sections the reader does not know about) is skipped. Elements are
grouped by (physical name, element type), and the nodes of elements shared
between partitions are collected into the interface accumulator of the mesh.

Functions
---------
:py:func:`read_gmsh`:
    Reads a mesh from a ``.msh`` file.
:py:func:`parse_gmsh`:
    Reads a mesh from a string or text stream.
"""

import io
import logging
import os
import re
from typing import Callable, Dict, Iterator, Optional, Set, TextIO, Union

import numpy as np

from .element_types import element_type
from .exceptions import (
    MalformedSectionError,
    MeshFileError,
    UnsupportedVersionError,
)
from .mesh_data import Element, GmshMesh, decode_ownership

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\S+")


class _TokenStream:
    """
    Sequential access to the tokens of a mesh file.

    Tokens are read line by line, so that a section handler can also take the
    unsplit remainder of the current line (a quoted name with spaces).
    """

    def __init__(self, text: str):
        self._lines: Iterator[str] = iter(text.splitlines())
        self._line = ""
        self._pos = 0

    def _next_token(self) -> Optional[str]:
        while True:
            match = _TOKEN_PATTERN.search(self._line, self._pos)
            if match is not None:
                self._pos = match.end()
                return match.group(0)
            line = next(self._lines, None)
            if line is None:
                return None
            self._line, self._pos = line, 0

    def __iter__(self) -> Iterator[str]:
        token = self._next_token()
        while token is not None:
            yield token
            token = self._next_token()

    def next(self, section: str) -> str:
        token = self._next_token()
        if token is None:
            raise MalformedSectionError(section, "unexpected end of file")
        return token

    def rest_of_line(self, section: str) -> str:
        """Returns the stripped remainder of the current line."""
        rest = self._line[self._pos :].strip()
        self._pos = len(self._line)
        if not rest:
            raise MalformedSectionError(section, "missing value at end of line")
        return rest

    def next_int(self, section: str) -> int:
        token = self.next(section)
        try:
            return int(token)
        except ValueError:
            raise MalformedSectionError(
                section, f"expected an integer, found '{token}'"
            ) from None

    def next_float(self, section: str) -> float:
        token = self.next(section)
        try:
            return float(token)
        except ValueError:
            raise MalformedSectionError(
                section, f"expected a number, found '{token}'"
            ) from None

    def next_count(self, section: str) -> int:
        count = self.next_int(section)
        if count < 0:
            raise MalformedSectionError(section, f"negative count {count}")
        return count


class GmshReader:
    """
    Decodes Gmsh ASCII files into `GmshMesh` objects.

    A reader instance can be reused; every call to `read` or `parse` returns a
    new mesh. Decoding either completes or raises a `GmshReaderError`.
    """

    MINIMUM_VERSION = 2.2
    MAXIMUM_VERSION = 3.0

    def __init__(self) -> None:
        self.mesh = GmshMesh()
        self._undeclared_physical_ids: Set[int] = set()
        self._handlers: Dict[str, Callable[[_TokenStream], None]] = {
            "$MeshFormat": self._read_mesh_format,
            "$PhysicalNames": self._read_physical_names,
            "$Nodes": self._read_nodes,
            "$Elements": self._read_elements,
        }

    def read(self, msh_file: Union[str, os.PathLike]) -> GmshMesh:
        """
        Reads the mesh stored in a ``.msh`` file.

        Args:
            msh_file: Path to the mesh file.

        Returns:
            The decoded mesh.

        Raises:
            MeshFileError: If the file is missing or cannot be read.
        """
        try:
            with open(msh_file, "r", encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise MeshFileError(
                f"Filename {msh_file} is not a Gmsh ASCII file: {e}"
            ) from e
        except OSError as e:
            raise MeshFileError(f"Filename {msh_file} is not valid: {e}") from e

        logger.info(f"Reading Gmsh file {msh_file}")
        return self.parse(text)

    def parse(self, source: Union[str, TextIO]) -> GmshMesh:
        """Decodes a mesh from the text of a ``.msh`` file or a text stream."""
        text = source if isinstance(source, str) else source.read()

        self.mesh = GmshMesh()
        self._undeclared_physical_ids = set()

        tokens = _TokenStream(text)
        for token in tokens:
            handler = self._handlers.get(token)
            if handler is not None:
                handler(tokens)

        logger.info(
            f"Read {self.mesh.num_nodes} nodes and {self.mesh.num_elements} "
            f"elements in {len(self.mesh.elements)} groups over "
            f"{self.mesh.number_of_partitions} partition(s)"
        )
        return self.mesh

    def _read_mesh_format(self, tokens: _TokenStream) -> None:
        section = "$MeshFormat"
        version = tokens.next_float(section)
        file_type = tokens.next_int(section)
        data_size = tokens.next_int(section)

        # MSH 4 stores nodes and elements in entity blocks
        if not self.MINIMUM_VERSION <= version < self.MAXIMUM_VERSION:
            raise UnsupportedVersionError(
                version, self.MINIMUM_VERSION, self.MAXIMUM_VERSION
            )
        if file_type != 0:
            raise MalformedSectionError(section, "binary mesh files are not supported")

        self.mesh.version = version
        self.mesh.file_type = file_type
        self.mesh.data_size = data_size
        logger.debug(f"Gmsh format version {version}")

    def _read_physical_names(self, tokens: _TokenStream) -> None:
        section = "$PhysicalNames"
        for _ in range(tokens.next_count(section)):
            dimension = tokens.next_int(section)
            physical_id = tokens.next_int(section)
            name = tokens.rest_of_line(section).strip('"')

            self.mesh.physical_names[physical_id] = name
            self.mesh.physical_dimensions[physical_id] = dimension

        logger.debug(f"Read {len(self.mesh.physical_names)} physical names")

    def _read_nodes(self, tokens: _TokenStream) -> None:
        section = "$Nodes"
        count = tokens.next_count(section)
        node_ids = np.empty(count, dtype=int)
        node_coords = np.empty((count, 3), dtype=float)

        for i in range(count):
            node_ids[i] = tokens.next_int(section)
            for j in range(3):
                node_coords[i, j] = tokens.next_float(section)

        self.mesh.set_nodes(node_ids, node_coords)
        logger.debug(f"Read {count} nodes")

    def _read_elements(self, tokens: _TokenStream) -> None:
        section = "$Elements"
        count = tokens.next_count(section)

        for _ in range(count):
            element_id = tokens.next_int(section)
            etype = element_type(tokens.next_int(section))
            number_of_tags = tokens.next_count(section)

            tags = tuple(tokens.next_int(section) for _ in range(number_of_tags))
            connectivity = tuple(
                tokens.next_int(section) for _ in range(etype.num_nodes)
            )
            ownership = decode_ownership(tags)

            element = Element(element_id, etype, tags, connectivity, ownership)
            self.mesh.add_element(self._physical_name(element.physical_id), element)

            self.mesh.number_of_partitions = max(
                self.mesh.number_of_partitions, ownership.owner, *ownership.sharers
            )
            for sharer in ownership.sharers:
                self.mesh.interfaces.add(ownership.owner, sharer, connectivity)

        logger.debug(f"Read {count} elements")

    def _physical_name(self, physical_id: int) -> str:
        """Returns the name of a physical group, or its id if it has none."""
        name = self.mesh.physical_names.get(physical_id)
        if name is not None:
            return name

        if physical_id not in self._undeclared_physical_ids:
            self._undeclared_physical_ids.add(physical_id)
            logger.warning(
                f"Physical group {physical_id} has no name; using '{physical_id}'"
            )
        return str(physical_id)


def read_gmsh(msh_file: Union[str, os.PathLike]) -> GmshMesh:
    """Reads a mesh from a Gmsh ``.msh`` file."""
    return GmshReader().read(msh_file)


def parse_gmsh(source: Union[str, bytes, TextIO]) -> GmshMesh:
    """Reads a mesh from the text of a Gmsh ``.msh`` file or a text stream."""
    if isinstance(source, bytes):
        source = io.TextIOWrapper(io.BytesIO(source), encoding="utf-8")
    return GmshReader().parse(source)
