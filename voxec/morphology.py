"""Local morphological operations: closing single-voxel gaps and dilation."""

from __future__ import annotations

from typing import Tuple

from voxec.postprocess import PostProcess, VoxelStorage

_AXES = ((1, 0, 0), (0, 1, 0), (0, 0, 1))


def _within(pos: Tuple[int, ...], lower, upper) -> bool:
    return all(lo <= c <= hi for c, lo, hi in zip(pos, lower, upper))


def _add(a: Tuple[int, ...], b: Tuple[int, ...], sign: int = 1) -> Tuple[int, int, int]:
    return (a[0] + sign * b[0], a[1] + sign * b[1], a[2] + sign * b[2])


class FillGaps(PostProcess):
    """Sets unset voxels whose two opposite neighbours along an axis are set.

    The result holds only the filled gaps; a threaded caller unions it with
    the input.
    """

    union_input = True

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        lower, upper = storage.bounds()
        output = storage.empty_copy()

        def is_set(pos) -> bool:
            return _within(pos, lower, upper) and storage.get(pos)

        i0, i1 = lower[0], upper[0]
        span = max(1, i1 - i0)
        for i in range(i0, i1 + 1):
            self.progress((i - i0) / span)
            for pos in VoxelStorage.box((i, lower[1], lower[2]), (i, upper[1], upper[2])):
                if is_set(pos):
                    continue
                if any(is_set(_add(pos, axis)) and is_set(_add(pos, axis, -1)) for axis in _AXES):
                    output.set(pos)
        self.progress(1.0)
        return output


class Offset(PostProcess):
    """Sets every unset voxel adjacent to a set one (a one-voxel dilation shell).

    With ``dimensions=2`` only neighbours in the same z layer are considered.
    """

    def __init__(self, dimensions: int = 3) -> None:
        super().__init__()
        if dimensions not in (2, 3):
            raise ValueError("dimensions must be 2 or 3")
        self.dimensions = dimensions

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        lower, upper = storage.bounds()
        output = storage.empty_copy()
        extents = tuple(output.extents)
        dk_range = (-1, 0, 1) if self.dimensions == 3 else (0,)
        offsets = [(di, dj, dk) for di in (-1, 0, 1) for dj in (-1, 0, 1) for dk in dk_range]

        def is_set(pos) -> bool:
            return _within(pos, lower, upper) and storage.get(pos)

        i0, i1 = lower[0], upper[0]
        span = max(1, i1 - i0)
        for i in range(i0, i1 + 1):
            self.progress((i - i0) / span)
            for pos in VoxelStorage.box((i, lower[1], lower[2]), (i, upper[1], upper[2])):
                if not is_set(pos):
                    continue
                for d in offsets:
                    neighbour = _add(pos, d)
                    if all(0 <= c < e for c, e in zip(neighbour, extents)) and not is_set(neighbour):
                        output.set(neighbour)
        self.progress(1.0)
        return output