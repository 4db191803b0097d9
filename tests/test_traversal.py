import math

import pytest

from voxec.postprocess import VoxelStorage
from voxec.traversal import (
    IndexKind,
    KeepOutmost,
    TraversalVoxelFiller,
    TraversalVoxelFillerInverse,
    TraversalVoxelFillerInverted,
    TraversalVoxelFillerSeparateComponents,
    Visitor,
    connected_components,
    query_leftmost,
)
from voxec.vec import Vec, make_vec

SHELL = 5 * 5 * 2 + 5 * 3 * 2 + 3 * 3 * 2


def _shell_with_core():
    storage = VoxelStorage((10, 10, 10))
    for i in range(2, 7):
        for j in range(2, 7):
            for k in range(2, 7):
                if (make_vec(4, 4, 4) - make_vec(i, j, k)).abs().less(2).all():
                    continue
                storage.set((i, j, k))
    return storage


def _boxes(count):
    storage = VoxelStorage((8 * count + 6, 10, 10))
    for n in range(count):
        x0 = 2 + 8 * n
        for i in range(x0, x0 + 5):
            for j in range(2, 7):
                for k in range(2, 7):
                    if x0 < i < x0 + 4 and 2 < j < 6 and 2 < k < 6:
                        continue
                    storage.set((i, j, k))
    return storage


def _count_visits(visitor, storage, seed):
    visits = []
    visitor(visits.append, storage, seed)
    return visits


def test_outmost():
    storage = _shell_with_core()
    assert storage.count() == SHELL
    storage.set((4, 4, 4))
    assert storage.count() == SHELL + 1

    leftmost = query_leftmost(storage)
    assert leftmost[0] == 2

    visits = _count_visits(Visitor(), storage, leftmost)
    assert len(visits) == SHELL

    outmost = KeepOutmost()(storage)
    assert outmost.count() == SHELL
    assert not outmost.get((4, 4, 4))


def test_max_depth():
    storage = _shell_with_core()
    storage.set((4, 4, 4))
    count = len(_count_visits(Visitor(), storage, query_leftmost(storage)))
    assert KeepOutmost()(storage).count() == count == SHELL

    for depth, expected in enumerate([1, 4, 10]):
        visits = _count_visits(Visitor(max_depth=depth), storage, make_vec(2, 2, 2))
        assert len(visits) == expected


def test_float_depth_26():
    storage = VoxelStorage((10, 10, 10))
    for pos in VoxelStorage.box((2, 2, 2), (6, 6, 6)):
        storage.set(pos)
    seed = storage.empty_copy()
    for k in range(3, 6):
        seed.set((4, 4, k))
    visits = _count_visits(Visitor(26, max_depth=math.sqrt(3.0)), storage, seed)
    assert len(visits) == 45


def test_float_depth_26_plane():
    storage = VoxelStorage((10, 10, 10))
    for pos in VoxelStorage.box((2, 2, 4), (6, 6, 4)):
        storage.set(pos)
    seed = storage.empty_copy()
    for i in range(3, 6):
        seed.set((i, 4, 4))
    visits = _count_visits(Visitor(26, max_depth=2.0), storage, seed)
    assert len(visits) == 21


def test_visits_are_tagged_voxels():
    storage = _shell_with_core()
    visits = _count_visits(Visitor(), storage, Vec(2, 2, 2))
    assert {v.kind for v in visits} == {IndexKind.VOXEL}
    assert visits[0].pos == Vec(2, 2, 2)


def test_empty_fill_goes_out_of_bounds():
    storage = VoxelStorage((3, 3, 3))
    visitor = Visitor()
    visits = _count_visits(visitor, storage, (0, 0, 0))
    assert len(visits) == 27
    assert visitor.went_out_of_bounds


def test_26_connected_depth_is_sqrt3_for_diagonal():
    storage = VoxelStorage((5, 5, 5))
    storage.set((1, 1, 1))
    storage.set((2, 2, 2))
    visitor = Visitor(26)
    visits = _count_visits(visitor, storage, (1, 1, 1))
    assert [v.pos for v in visits] == [Vec(1, 1, 1), Vec(2, 2, 2)]
    assert visitor.depth == pytest.approx(math.sqrt(3.0))


def test_invalid_connectedness():
    with pytest.raises(ValueError):
        Visitor(connectedness=8)


def test_seed_valuation_not_constant():
    storage = VoxelStorage((5, 5, 5))
    storage.set((1, 1, 1))
    storage.set((2, 2, 2))
    seed = storage.empty_copy()
    seed.set((1, 1, 1))
    seed.set((1, 1, 2))
    with pytest.raises(ValueError, match="not constant"):
        Visitor()(lambda index: None, storage, seed)


def test_query_leftmost_empty():
    with pytest.raises(ValueError, match="no result"):
        query_leftmost(VoxelStorage((4, 4, 4)))


def test_connected_components_keeps_values():
    storage = VoxelStorage((6, 6, 6), value_bits=32)
    storage.set((1, 1, 1), 7)
    storage.set((1, 1, 2), 8)
    storage.set((4, 4, 4), 9)
    components = []
    connected_components(storage, components.append)
    assert [c.count() for c in components] == [2, 1]
    assert components[0].value((1, 1, 2)) == 8
    assert components[1].value((4, 4, 4)) == 9
    assert storage.count() == 3


def test_filler_single_box_interior():
    surface = _boxes(1)
    volume = TraversalVoxelFiller()(surface)
    assert volume.count() == 27
    assert volume.get((4, 4, 4))
    assert not volume.get((2, 2, 2))


def test_filler_triple_fills_one_volume():
    surface = _boxes(3)
    assert surface.count() == 3 * SHELL
    volume = TraversalVoxelFiller()(surface)
    assert volume.count() == 27


def test_filler_triple_separate():
    surface = _boxes(3)
    volume = TraversalVoxelFillerSeparateComponents()(surface)
    assert volume.count() == 3 * 27
    assert volume.count() + surface.count() == 3 * 125


def test_filler_triple_inverse():
    surface = _boxes(3)
    volume = TraversalVoxelFillerInverse()(surface)
    assert volume.count() == 3 * 27
    assert volume.count() + surface.count() == 3 * 125


def test_filler_inverted_is_exterior():
    surface = _boxes(1)
    exterior = TraversalVoxelFillerInverted()(surface)
    assert exterior.count() == 14 * 10 * 10 - 125
    assert exterior.get((0, 0, 0))
    assert not exterior.get((4, 4, 4))


def test_filler_empty_returns_copy():
    result = TraversalVoxelFiller()(VoxelStorage((4, 4, 4)))
    assert result.count() == 0


def test_filler_outside_needs_padding():
    storage = VoxelStorage((4, 4, 4))
    storage.set((0, 0, 0))
    with pytest.raises(ValueError, match="padding"):
        TraversalVoxelFillerInverse()(storage)


def test_filler_outside_needs_padding_on_each_axis():
    storage = VoxelStorage((4, 4, 4))
    storage.set((0, 2, 2))
    with pytest.raises(ValueError, match="padding"):
        TraversalVoxelFillerInverse()(storage)


def test_filler_reports_progress_to_completion():
    reported = []
    filler = TraversalVoxelFiller()
    filler.set_progress_callback(reported.append)
    filler(_boxes(1))
    assert reported[-1] == 100
    assert all(0 <= p <= 100 for p in reported)