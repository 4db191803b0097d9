"""Translating voxels and sweeping them along an axis."""

from __future__ import annotations

from typing import Optional

from voxec.postprocess import VoxelStorage


def _in_extents(pos, extents) -> bool:
    return all(0 <= c < e for c, e in zip(pos, extents))


class Shift:
    """Translates every set voxel by (dx, dy, dz), dropping what falls outside."""

    def __call__(self, storage: VoxelStorage, dx: int, dy: int, dz: int) -> VoxelStorage:
        shifted = storage.empty_copy()
        extents = tuple(shifted.extents)
        lower, upper = storage.bounds()
        use_value = storage.value_bits == 32
        for pos in VoxelStorage.box(lower, upper):
            value = storage.value(pos)
            if not value:
                continue
            moved = (pos[0] + dx, pos[1] + dy, pos[2] + dz)
            if _in_extents(moved, extents):
                shifted.set(moved, value if use_value else 1)
        return shifted


class Sweep:
    """Extrudes set voxels along one axis.

    Each voxel is extended ``|d| - 1`` steps in the direction of the single
    nonzero component, multiplied by the voxel value for 32-bit storages.
    With ``until`` given, sweeping continues until a voxel set in ``until``
    or the grid edge is reached; ``max_depth`` caps the number of steps.
    """

    def __init__(
        self, until: Optional[VoxelStorage] = None, max_depth: Optional[int] = None
    ) -> None:
        self.until = until
        self.max_depth = max_depth

    def __call__(self, storage: VoxelStorage, dx: int, dy: int, dz: int) -> VoxelStorage:
        d = (dx, dy, dz)
        nonzero = [axis for axis, v in enumerate(d) if v != 0]
        if len(nonzero) != 1:
            raise ValueError("Only orthogonal sweeps supported")
        axis = nonzero[0]
        step = 1 if d[axis] > 0 else -1
        length = abs(d[axis])
        use_count = storage.value_bits == 32

        swept = storage.copy()
        extents = tuple(swept.extents)
        lower, upper = storage.bounds()
        multiplier = 1
        for pos in VoxelStorage.box(lower, upper):
            if not storage.get(pos):
                continue
            if use_count:
                multiplier = storage.value(pos)
            current = list(pos)
            i = 1
            while self.until is not None or i < length * multiplier:
                current[axis] += step
                if not _in_extents(current, extents):
                    break
                if self.until is not None and self.until.get(current):
                    break
                swept.set(current)
                if self.max_depth is not None and i >= self.max_depth:
                    break
                i += 1
        return swept