"""In-memory voxel storage and the base for post-processing operations."""

from __future__ import annotations

import abc
from itertools import product
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from voxec.vec import Vec

Position = Tuple[int, int, int]

_NEIGHBOURS = tuple(d for d in product((-1, 0, 1), repeat=3) if d != (0, 0, 0))


class VoxelStorage:
    """A sparse regular grid of voxels.

    With ``value_bits=1`` a voxel is simply set or unset; with
    ``value_bits=32`` every set voxel carries an unsigned 32-bit value, and
    a value of zero means unset.
    """

    def __init__(self, extents: Iterable[int], value_bits: int = 1) -> None:
        dims = tuple(int(e) for e in extents)
        if len(dims) != 3 or any(d <= 0 for d in dims):
            raise ValueError(f"invalid extents {dims!r}")
        if value_bits not in (1, 32):
            raise ValueError(f"unsupported value bits {value_bits}")
        self._extents = Vec(*dims)
        self._value_bits = value_bits
        self._voxels: Dict[Position, int] = {}

    @property
    def extents(self) -> Vec:
        return self._extents

    @property
    def value_bits(self) -> int:
        return self._value_bits

    @staticmethod
    def _key(pos: Iterable[int]) -> Position:
        key = tuple(int(c) for c in pos)
        if len(key) != 3:
            raise ValueError(f"expected a 3D position, got {key!r}")
        return key  # type: ignore[return-value]

    @staticmethod
    def box(lower: Iterable[int], upper: Iterable[int]) -> Iterator[Position]:
        """Iterate positions of the inclusive box from ``lower`` to ``upper``."""
        return product(*(range(lo, hi + 1) for lo, hi in zip(lower, upper)))

    def contains(self, pos: Iterable[int]) -> bool:
        """Whether ``pos`` lies inside the grid extents."""
        return all(0 <= c < e for c, e in zip(self._key(pos), self._extents))

    def get(self, pos: Iterable[int]) -> bool:
        return self._key(pos) in self._voxels

    def value(self, pos: Iterable[int]) -> int:
        return self._voxels.get(self._key(pos), 0)

    def set(self, pos: Iterable[int], value: int = 1) -> None:
        key = self._key(pos)
        if not self.contains(key):
            raise IndexError(f"position {key} outside extents {tuple(self._extents)}")
        if self._value_bits == 1:
            value = 1 if value else 0
        elif not 0 <= value < 2 ** 32:
            raise ValueError(f"value {value} does not fit in 32 bits")
        if value:
            self._voxels[key] = value
        else:
            self._voxels.pop(key, None)

    def discard(self, pos: Iterable[int]) -> None:
        self._voxels.pop(self._key(pos), None)

    def count(self) -> int:
        return len(self._voxels)

    def __iter__(self) -> Iterator[Vec]:
        return (Vec(*key) for key in sorted(self._voxels))

    def items(self) -> Iterator[Tuple[Vec, int]]:
        return ((Vec(*key), self._voxels[key]) for key in sorted(self._voxels))

    def bounds(self) -> Tuple[Vec, Vec]:
        """Inclusive bounding box of the set voxels; an inverted box when empty."""
        if not self._voxels:
            return Vec(0, 0, 0), Vec(-1, -1, -1)
        axes = list(zip(*self._voxels))
        return Vec(*(min(a) for a in axes)), Vec(*(max(a) for a in axes))

    def empty_copy(self) -> "VoxelStorage":
        return VoxelStorage(self._extents, self._value_bits)

    def copy(self) -> "VoxelStorage":
        result = self.empty_copy()
        result._voxels = dict(self._voxels)
        return result

    def inverted(self) -> "VoxelStorage":
        result = self.empty_copy()
        result._voxels = {
            key: 1
            for key in product(*(range(e) for e in self._extents))
            if key not in self._voxels
        }
        return result

    def _check_compatible(self, other: "VoxelStorage") -> None:
        if other.extents != self._extents:
            raise ValueError("storages have different extents")

    def boolean_union_inplace(self, other: "VoxelStorage") -> None:
        self._check_compatible(other)
        for key, value in other._voxels.items():
            self.set(key, value)

    def boolean_subtraction_inplace(self, other: "VoxelStorage") -> None:
        self._check_compatible(other)
        for key in other._voxels:
            self._voxels.pop(key, None)


class PostProcess(abc.ABC):
    """An operation mapping a voxel storage onto a new voxel storage."""

    union_input = False

    def __init__(self) -> None:
        self.silent = False
        self._progress_callback: Optional[Callable[[int], None]] = None
        self._application_progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Optional[Callable[[int], None]]) -> None:
        """Receive progress as a percentage; suppressed when silent."""
        self._progress_callback = callback

    def set_application_progress_callback(
        self, callback: Optional[Callable[[float], None]]
    ) -> None:
        """Receive progress as a fraction in [0, 1]."""
        self._application_progress_callback = callback

    def progress(self, fraction: float) -> None:
        if self._application_progress_callback is not None:
            self._application_progress_callback(fraction)
        if not self.silent and self._progress_callback is not None:
            self._progress_callback(int(fraction * 100.0))

    @abc.abstractmethod
    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        raise NotImplementedError


class EdgeDetect(PostProcess):
    """Keeps set voxels that have both set and unset neighbours."""

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        lower, upper = storage.bounds()
        output = storage.empty_copy()

        def is_set(pos: Position) -> bool:
            return all(lo <= c <= hi for c, lo, hi in zip(pos, lower, upper)) and storage.get(pos)

        for pos in VoxelStorage.box(lower, upper):
            if not is_set(pos):
                continue
            some_set = some_unset = False
            for d in _NEIGHBOURS:
                neighbour = (pos[0] + d[0], pos[1] + d[1], pos[2] + d[2])
                if is_set(neighbour):
                    some_set = True
                else:
                    some_unset = True
                if some_set and some_unset:
                    break
            if some_set and some_unset:
                output.set(pos)
        return output