"""Voxel grid vectors, in-memory voxel storage, post-processing, traversal and voxelfile parsing."""

__version__ = "0.1.0"

__all__ = [
    "vec",
    "progress",
    "voxelfile",
    "postprocess",
    "morphology",
    "transform",
    "traversal",
]