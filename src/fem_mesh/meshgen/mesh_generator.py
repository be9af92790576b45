"""
Generation of partitioned sample meshes with the Gmsh Python API.

The generated files use the MSH 2.2 ASCII format with partition tags, which is
the input expected by `fem_mesh.gmshreader`.
"""

import logging
import os

try:
    import gmsh
except (ImportError, OSError):
    gmsh = None

logger = logging.getLogger(__name__)

MESH_TYPES = ("structured", "triangular")


def _set_structured(nx: int, ny: int, length: float) -> None:
    """Sets transfinite curves and recombination on every surface."""
    for surface_dim_tag in gmsh.model.getEntities(2):
        surface_tag = surface_dim_tag[1]
        gmsh.model.mesh.setTransfiniteSurface(surface_tag)
        gmsh.model.mesh.setRecombine(2, surface_tag)

    for curve_dim_tag in gmsh.model.getEntities(1):
        p_tags = gmsh.model.getBoundary([curve_dim_tag], oriented=False)
        coord_start = gmsh.model.getValue(0, p_tags[0][1], [])
        coord_end = gmsh.model.getValue(0, p_tags[1][1], [])

        if abs(coord_start[1] - coord_end[1]) < 1e-6 * length:  # Horizontal
            gmsh.model.mesh.setTransfiniteCurve(curve_dim_tag[1], nx + 1)
        else:  # Vertical
            gmsh.model.mesh.setTransfiniteCurve(curve_dim_tag[1], ny + 1)


def create_partitioned_rectangle(
    length: float,
    height: float,
    nx: int,
    ny: int,
    n_parts: int,
    filename: str = "data/rectangle_mesh.msh",
    mesh_type: str = "structured",
    gmsh_verbose: int = 0,
) -> str:
    """
    Meshes a rectangle, partitions it and writes it in the MSH 2.2 format.

    The boundary lines are written as the physical groups "left", "right",
    "bottom" and "top", the surface as "domain". Every element carries the
    partition tags of the format, including the ghost partitions of the
    elements on partition boundaries.

    Args:
        length (float): The length of the rectangle along the x-axis.
        height (float): The height of the rectangle along the y-axis.
        nx (int): The number of elements along the length (x-axis).
        ny (int): The number of elements along the height (y-axis).
        n_parts (int): The number of partitions. 1 writes an unpartitioned mesh.
        filename (str): The path to save the output .msh file.
        mesh_type (str): "structured" (quadrilaterals) or "triangular".
        gmsh_verbose (int): The verbosity level for the Gmsh API.

    Returns:
        The path of the written file.
    """
    if gmsh is None:
        raise RuntimeError("Gmsh Python API is not available.")
    if mesh_type not in MESH_TYPES:
        raise ValueError("mesh_type must be 'structured' or 'triangular'")
    if nx < 1 or ny < 1:
        raise ValueError("nx and ny must be positive integers.")
    if n_parts < 1:
        raise ValueError("n_parts must be a positive integer.")

    output_dir = os.path.dirname(filename)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    gmsh.initialize()
    gmsh.option.setNumber("General.Verbosity", gmsh_verbose)
    try:
        gmsh.model.add(f"{mesh_type}_rectangle")

        p1 = gmsh.model.geo.addPoint(0, 0, 0)
        p2 = gmsh.model.geo.addPoint(length, 0, 0)
        p3 = gmsh.model.geo.addPoint(length, height, 0)
        p4 = gmsh.model.geo.addPoint(0, height, 0)

        l_bottom = gmsh.model.geo.addLine(p1, p2)
        l_right = gmsh.model.geo.addLine(p2, p3)
        l_top = gmsh.model.geo.addLine(p3, p4)
        l_left = gmsh.model.geo.addLine(p4, p1)

        cl = gmsh.model.geo.addCurveLoop([l_bottom, l_right, l_top, l_left])
        s = gmsh.model.geo.addPlaneSurface([cl])
        gmsh.model.geo.synchronize()

        if mesh_type == "structured":
            _set_structured(nx, ny, length)
        else:
            char_length = min(length / nx, height / ny)
            gmsh.option.setNumber("Mesh.CharacteristicLengthMin", char_length * 0.9)
            gmsh.option.setNumber("Mesh.CharacteristicLengthMax", char_length * 1.1)

        gmsh.model.addPhysicalGroup(1, [l_left], name="left")
        gmsh.model.addPhysicalGroup(1, [l_right], name="right")
        gmsh.model.addPhysicalGroup(1, [l_bottom], name="bottom")
        gmsh.model.addPhysicalGroup(1, [l_top], name="top")
        gmsh.model.addPhysicalGroup(2, [s], name="domain")

        gmsh.model.mesh.generate(2)

        if n_parts > 1:
            gmsh.option.setNumber("Mesh.PartitionCreateGhostCells", 1)
            gmsh.option.setNumber("Mesh.PartitionOldStyleMsh2", 1)
            gmsh.model.mesh.partition(n_parts)

        gmsh.option.setNumber("Mesh.MshFileVersion", 2.2)
        gmsh.option.setNumber("Mesh.Binary", 0)
        gmsh.write(filename)
    finally:
        gmsh.finalize()

    logger.info(
        f"Created {mesh_type} mesh with approx {nx}x{ny} elements in "
        f"{n_parts} partition(s): {filename}"
    )
    return filename
