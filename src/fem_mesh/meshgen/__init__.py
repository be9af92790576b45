from .mesh_generator import create_partitioned_rectangle

__all__ = [
    "create_partitioned_rectangle",
]
