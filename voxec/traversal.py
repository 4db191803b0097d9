"""Flood-fill traversal over voxel grids and the fillers built on it."""

from __future__ import annotations

import enum
import heapq
import itertools
import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from voxec.postprocess import PostProcess, VoxelStorage
from voxec.vec import Vec

Position = Tuple[int, int, int]

_MANHATTAN_TO_EUCLIDEAN = (0.0, 1.0, math.sqrt(2.0), math.sqrt(3.0))
_DEPTH_TOLERANCE = 1.0e-9


class IndexKind(enum.Enum):
    CHUNK = "chunk"
    VOXEL = "voxel"


@dataclass(frozen=True)
class TaggedIndex:
    """A position reported by a traversal, tagged with what it denotes."""

    kind: IndexKind
    pos: Vec


class _FifoQueue:
    def __init__(self) -> None:
        self._items: deque = deque()

    def push(self, depth: float, pos: Position) -> None:
        self._items.append((depth, pos))

    def pop(self) -> Tuple[float, Position]:
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class _DistanceQueue:
    """Pops the smallest distance first; equal distances in insertion order."""

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, Position]] = []
        self._counter = itertools.count()

    def push(self, depth: float, pos: Position) -> None:
        heapq.heappush(self._heap, (depth, next(self._counter), pos))

    def pop(self) -> Tuple[float, Position]:
        depth, _, pos = heapq.heappop(self._heap)
        return depth, pos

    def clear(self) -> None:
        self._heap.clear()

    def __len__(self) -> int:
        return len(self._heap)


class Visitor:
    """Visits voxels connected to a seed that share the seed's valuation.

    ``connectedness`` is 6 (face neighbours, breadth first) or 26 (all
    neighbours, nearest first by summed step length). ``fn`` is called
    once per visited voxel with a TaggedIndex. ``max_depth`` limits the
    distance from the seed; ``post_condition`` can reject positions.
    """

    def __init__(
        self,
        connectedness: int = 6,
        post_condition: Optional[Callable[[Position], bool]] = None,
        max_depth: Optional[float] = None,
    ) -> None:
        if connectedness not in (6, 26):
            raise ValueError(f"unsupported connectedness {connectedness}")
        self.connectedness = connectedness
        self.post_condition = post_condition or (lambda pos: True)
        self.max_depth = max_depth
        self.depth = math.nan
        self.went_out_of_bounds = False
        self.queue: Union[_FifoQueue, _DistanceQueue] = (
            _FifoQueue() if connectedness == 6 else _DistanceQueue()
        )
        self._storage: Optional[VoxelStorage] = None
        self._visited: set = set()
        self._lower: Tuple[int, ...] = ()
        self._upper: Tuple[int, ...] = ()
        self._extents: Tuple[int, ...] = ()
        self._search_value = False

    @property
    def pending(self) -> int:
        """Number of entries waiting in the queue."""
        return len(self.queue)

    def _init(self, storage: VoxelStorage) -> None:
        self._storage = storage
        self._visited = set()
        lower, upper = storage.bounds()
        self._lower, self._upper = tuple(lower), tuple(upper)
        self._extents = tuple(storage.extents)
        self.went_out_of_bounds = False
        self.queue.clear()

    def _get(self, pos: Position) -> bool:
        if any(c < lo or c > hi for c, lo, hi in zip(pos, self._lower, self._upper)):
            return False
        return self._storage.get(pos)

    def _add_neighbours(self, depth: float, pos: Position) -> None:
        if self.connectedness == 6:
            for axis in range(3):
                for step in (-1, 1):
                    if step < 0 and pos[axis] == 0:
                        self.went_out_of_bounds = True
                        continue
                    neighbour = list(pos)
                    neighbour[axis] += step
                    if step > 0 and any(c >= e for c, e in zip(neighbour, self._extents)):
                        self.went_out_of_bounds = True
                        continue
                    neighbour_t = tuple(neighbour)
                    if self._get(neighbour_t) == self._search_value:
                        self.queue.push(depth + 1.0, neighbour_t)
            return

        for i in range(3):
            if i == 0 and pos[0] == 0:
                self.went_out_of_bounds = True
                continue
            for j in range(3):
                if j == 0 and pos[1] == 0:
                    self.went_out_of_bounds = True
                    continue
                for k in range(3):
                    if k == 0 and pos[2] == 0:
                        self.went_out_of_bounds = True
                        continue
                    if i == 1 and j == 1 and k == 1:
                        continue
                    neighbour = (pos[0] + i - 1, pos[1] + j - 1, pos[2] + k - 1)
                    if any(c >= e for c, e in zip(neighbour, self._extents)):
                        self.went_out_of_bounds = True
                        continue
                    if self._get(neighbour) == self._search_value:
                        manhattan = (i != 1) + (j != 1) + (k != 1)
                        self.queue.push(depth + _MANHATTAN_TO_EUCLIDEAN[manhattan], neighbour)

    def _process(self, fn: Callable[[TaggedIndex], None], depth: float, pos: Position) -> None:
        if pos in self._visited:
            return
        if self.max_depth is not None and depth - _DEPTH_TOLERANCE > self.max_depth:
            return
        if self.post_condition(pos):
            self.depth = depth
            fn(TaggedIndex(IndexKind.VOXEL, Vec(*pos)))
            self._add_neighbours(depth, pos)
            self._visited.add(pos)

    def __call__(
        self,
        fn: Callable[[TaggedIndex], None],
        storage: VoxelStorage,
        seed: Union[VoxelStorage, Iterable[int]],
    ) -> None:
        self._init(storage)
        if isinstance(seed, VoxelStorage):
            first = True
            for seed_pos in seed:
                pos = tuple(int(c) for c in seed_pos)
                value = self._get(pos)
                if not first and value != self._search_value:
                    raise ValueError("Valuation for seed not constant")
                self._search_value = value
                self._process(fn, 0.0, pos)
                first = False
        else:
            pos = tuple(int(c) for c in seed)
            self._search_value = self._get(pos)
            self._process(fn, 0.0, pos)

        while self.queue:
            depth, pos = self.queue.pop()
            self._process(fn, depth, pos)


def query_leftmost(storage: VoxelStorage) -> Vec:
    """First set voxel on the lowest x plane of the bounds, scanning y then z."""
    lower, upper = storage.bounds()
    i0 = lower[0]
    for j in range(lower[1], upper[1] + 1):
        for k in range(lower[2], upper[2] + 1):
            if storage.get((i0, j, k)):
                return Vec(i0, j, k)
    raise ValueError("query yields no result")


def connected_components(
    storage: VoxelStorage, fn: Callable[[VoxelStorage], None]
) -> None:
    """Call ``fn`` with each 6-connected component of the set voxels."""
    remaining = storage.copy()
    while remaining.count() > 0:
        seed = query_leftmost(remaining)
        output = remaining.empty_copy()

        def collect(index: TaggedIndex) -> None:
            if output.value_bits == 1:
                output.set(index.pos)
            else:
                output.set(index.pos, remaining.value(index.pos))

        Visitor()(collect, remaining, seed)
        fn(output)
        remaining.boolean_subtraction_inplace(output)


class KeepOutmost(PostProcess):
    """Keeps the component connected to the leftmost set voxel."""

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        visitor = Visitor()
        seed = query_leftmost(storage)
        output = storage.empty_copy()
        processed = 0

        def keep(index: TaggedIndex) -> None:
            nonlocal processed
            output.set(index.pos)
            processed += 1
            self.progress(processed / (processed + visitor.pending))

        visitor(keep, storage, seed)
        self.progress(1.0)
        return output


class TraversalVoxelFiller(PostProcess):
    """Fills the empty region around a seed bounded by set voxels.

    The seed is the centre of the bounds, or just outside the lower bound
    with ``start_outside``. When the fill escapes to the grid edge and
    ``invert`` is set, the result is the complement minus the input, which
    is the enclosed volume. The fill is written into ``output``, created
    when not given.
    """

    def __init__(
        self,
        start_outside: bool = False,
        invert: bool = True,
        output: Optional[VoxelStorage] = None,
    ) -> None:
        super().__init__()
        self.start_outside = start_outside
        self.invert = invert
        self.output = output

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        if storage.count() == 0:
            return storage.copy()

        lower, upper = storage.bounds()
        if self.start_outside and lower.equal(0).all():
            raise ValueError("Not enough padding for outside fill")

        seed = lower - 1 if self.start_outside else (lower + upper) // 2
        if seed.less(0).any() or seed.greater_equal(storage.extents).any():
            raise ValueError("Not enough padding for outside fill")

        while storage.get(seed):
            seed = seed.replace(0, seed[0] + 1)

        if self.output is None:
            self.output = storage.empty_copy()
        output = self.output

        visitor = Visitor()
        processed = 0

        def fill(index: TaggedIndex) -> None:
            nonlocal processed
            output.set(index.pos)
            processed += 1
            self.progress(processed / (processed + visitor.pending))

        visitor(fill, storage, seed)

        if self.start_outside and not visitor.went_out_of_bounds:
            raise ValueError("Failed to select seed out of voxel volume")

        if visitor.went_out_of_bounds and self.invert:
            inverted = output.inverted()
            inverted.boolean_subtraction_inplace(storage)
            self.output = inverted

        self.progress(1.0)
        return self.output


class TraversalVoxelFillerSeparateComponents(PostProcess):
    """Fills each connected component on its own, into one shared output."""

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        filler = TraversalVoxelFiller(output=storage.empty_copy())
        connected_components(storage, filler)
        return filler.output


class TraversalVoxelFillerInverse(PostProcess):
    """Fills from outside the geometry and returns the enclosed volume."""

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        return TraversalVoxelFiller(start_outside=True)(storage)


class TraversalVoxelFillerInverted(PostProcess):
    """Fills from outside the geometry and returns the exterior region."""

    def __call__(self, storage: VoxelStorage) -> VoxelStorage:
        return TraversalVoxelFiller(start_outside=True, invert=False)(storage)