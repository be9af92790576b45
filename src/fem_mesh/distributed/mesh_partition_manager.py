# -*- coding: utf-8 -*-
"""
A manager for splitting a decoded mesh into partition meshes and writing them.

This module provides the `MeshPartitionManager` class, which takes a global
`GmshMesh`, resolves the interfaces between its partitions once, creates a
`LocalMesh` for every partition and writes one JSON document per partition.
Partitions do not depend on each other once the interface table is known, so
they can be processed by parallel workers.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ..common.options import PartitionOptions
from ..gmshreader.mesh_data import GmshMesh
from ..gmshreader.reader import read_gmsh
from .interface import InterfaceGroup, InterfaceTable
from .local_mesh import LocalMesh
from .writer import output_path, partition_document, write_document

logger = logging.getLogger(__name__)


@dataclass
class PartitionExport:
    """The mesh, interfaces and JSON document of one partition."""

    partition: int
    local_mesh: LocalMesh
    interfaces: Optional[List[InterfaceGroup]]
    document: Dict[str, Any]
    path: Optional[str] = None


class MeshPartitionManager:
    """
    Manages the creation and export of partition meshes.
    This class is designed as a stateless manager, providing class methods
    for building and writing partition meshes.
    """

    @staticmethod
    def _resolve_options(options: Optional[PartitionOptions]) -> PartitionOptions:
        return options if options is not None else PartitionOptions()

    @staticmethod
    def _export_partition(
        global_mesh: GmshMesh,
        interface_table: InterfaceTable,
        partition: int,
        options: PartitionOptions,
    ) -> PartitionExport:
        """Builds the local mesh and document of one partition."""
        local_mesh = LocalMesh.from_global_mesh(
            global_mesh, partition, options.ordering, options.indexing_base
        )
        if local_mesh.is_empty:
            logger.warning(f"Partition {partition} owns no elements")

        interfaces = (
            interface_table.for_partition(partition)
            if global_mesh.is_distributed
            else None
        )
        document = partition_document(
            local_mesh,
            interfaces,
            interface_table.number_of_interface_nodes,
            options.print_indices,
        )
        logger.debug(
            f"Partition {partition}: {local_mesh.n_elements} elements, "
            f"{local_mesh.n_nodes} nodes"
        )
        return PartitionExport(partition, local_mesh, interfaces, document)

    @classmethod
    def export_partitions(
        cls,
        global_mesh: GmshMesh,
        options: Optional[PartitionOptions] = None,
        interface_table: Optional[InterfaceTable] = None,
    ) -> List[PartitionExport]:
        """
        Builds the local mesh and JSON document of every partition.

        The interface table is computed once and shared by all partitions, so
        that every partition uses the same global interface numbering.

        Args:
            global_mesh: The decoded mesh.
            options: Numbering and worker settings.
            interface_table: The interfaces of `global_mesh`, if the caller
                already resolved them. Computed from the mesh otherwise.

        Returns:
            One export per partition, ordered by partition id.
        """
        options = cls._resolve_options(options)
        if interface_table is None:
            interface_table = InterfaceTable.from_accumulator(global_mesh.interfaces)
        partitions = range(1, global_mesh.number_of_partitions + 1)

        def export(partition: int) -> PartitionExport:
            return cls._export_partition(
                global_mesh, interface_table, partition, options
            )

        if options.max_workers > 1 and len(partitions) > 1:
            with ThreadPoolExecutor(max_workers=options.max_workers) as executor:
                exports = list(executor.map(export, partitions))
        else:
            exports = [export(p) for p in partitions]

        logger.info(
            f"Built {len(exports)} partition(s) with "
            f"{interface_table.number_of_interface_nodes} interface nodes"
        )
        return exports

    @classmethod
    def create_local_meshes(
        cls, global_mesh: GmshMesh, options: Optional[PartitionOptions] = None
    ) -> List[LocalMesh]:
        """Creates the LocalMesh of every partition, ordered by partition id."""
        return [e.local_mesh for e in cls.export_partitions(global_mesh, options)]

    @classmethod
    def write_partitions(
        cls,
        global_mesh: GmshMesh,
        msh_file: Union[str, os.PathLike],
        options: Optional[PartitionOptions] = None,
        indent: Optional[int] = None,
        interface_table: Optional[InterfaceTable] = None,
    ) -> List[PartitionExport]:
        """
        Writes the document of every partition next to `msh_file`, or into
        `options.output_dir` when it is set.
        """
        options = cls._resolve_options(options)
        exports = cls.export_partitions(global_mesh, options, interface_table)
        for export in exports:
            path = output_path(
                msh_file,
                export.partition,
                global_mesh.is_distributed,
                options.output_dir,
            )
            export.path = write_document(export.document, path, indent=indent)
            logger.info(f"Wrote partition {export.partition} to {path}")
        return exports

    @classmethod
    def convert(
        cls,
        msh_file: Union[str, os.PathLike],
        options: Optional[PartitionOptions] = None,
        indent: Optional[int] = None,
    ) -> List[PartitionExport]:
        """Reads a ``.msh`` file and writes the documents of all its partitions."""
        global_mesh = read_gmsh(msh_file)
        return cls.write_partitions(global_mesh, msh_file, options, indent=indent)
