"""Conversion of Gmsh .msh files into partition mesh documents."""

from __future__ import annotations

import argparse
import logging
import sys

from .common.logging_config import setup_logging
from .common.options import IndexingBase, NodalOrdering, PartitionOptions
from .distributed.interface import InterfaceTable
from .distributed.mesh_partition_manager import MeshPartitionManager
from .distributed.reporting import print_partition_summary
from .gmshreader.exceptions import GmshReaderError
from .gmshreader.reader import read_gmsh


def _generate_parser() -> argparse.ArgumentParser:
    """Returns a parser for command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fem-mesh",
        description="Split a partitioned Gmsh mesh into one JSON mesh per partition.",
    )
    parser.add_argument(
        "infile", type=str, help="Gmsh ASCII file (MSH 2.2 or a later 2.x version)"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=None,
        metavar="dir",
        help="Directory for the written files. Defaults to the input directory.",
    )
    parser.add_argument(
        "--ordering",
        choices=[o.value for o in NodalOrdering],
        default=NodalOrdering.LOCAL.value,
        help="Renumber the connectivity per partition (local) or keep the "
        "node ids of the input mesh (global).",
    )
    parser.add_argument(
        "--zero-based",
        action="store_true",
        help="Write node and element numbers starting at zero.",
    )
    parser.add_argument(
        "--no-indices",
        action="store_true",
        help="Do not write the node and element index arrays.",
    )
    parser.add_argument(
        "-j",
        "--workers",
        type=int,
        default=1,
        help="Number of partitions processed in parallel.",
    )
    parser.add_argument(
        "--indent", type=int, default=None, help="Indentation of the JSON output."
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Whether or not to show information on stdout.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug information."
    )
    return parser


def convert(argv: list[str] | None = None) -> int:
    """Reads a Gmsh file and writes the mesh of every partition.

    Args:
        argv: Command line options. Uses ``sys.argv`` when None.

    Returns:
        The exit status.

    """
    args = _generate_parser().parse_args(argv)

    if not args.quiet:
        setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        options = PartitionOptions(
            ordering=NodalOrdering(args.ordering),
            indexing_base=IndexingBase.ZERO if args.zero_based else IndexingBase.ONE,
            print_indices=not args.no_indices,
            max_workers=args.workers,
            output_dir=args.output_dir,
        )
    except ValueError as e:
        print(f"fem-mesh: error: {e}", file=sys.stderr)
        return 2

    try:
        global_mesh = read_gmsh(args.infile)
    except GmshReaderError as e:
        print(f"fem-mesh: error: {e}", file=sys.stderr)
        return 1

    interface_table = InterfaceTable.from_accumulator(global_mesh.interfaces)
    try:
        exports = MeshPartitionManager.write_partitions(
            global_mesh,
            args.infile,
            options,
            indent=args.indent,
            interface_table=interface_table,
        )
    except OSError as e:
        print(f"fem-mesh: error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_partition_summary(exports, interface_table)
    return 0


def main() -> None:
    sys.exit(convert())
