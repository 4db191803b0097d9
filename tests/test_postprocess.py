import pytest

from voxec.postprocess import EdgeDetect, PostProcess, VoxelStorage
from voxec.vec import make_vec


def _cube(lo, hi, extents=(10, 10, 10)):
    storage = VoxelStorage(extents)
    for pos in VoxelStorage.box((lo,) * 3, (hi,) * 3):
        storage.set(pos)
    return storage


def test_set_get_and_count():
    storage = VoxelStorage((10, 10, 10))
    storage.set(make_vec(1, 2, 3))
    assert storage.get((1, 2, 3))
    assert not storage.get((3, 2, 1))
    assert storage.count() == 1


def test_set_outside_extents_raises():
    storage = VoxelStorage((4, 4, 4))
    with pytest.raises(IndexError):
        storage.set((4, 0, 0))


def test_invalid_value_bits():
    with pytest.raises(ValueError):
        VoxelStorage((4, 4, 4), value_bits=8)


def test_value_storage_zero_means_unset():
    storage = VoxelStorage((4, 4, 4), value_bits=32)
    storage.set((1, 1, 1), 7)
    assert storage.value((1, 1, 1)) == 7
    storage.set((1, 1, 1), 0)
    assert not storage.get((1, 1, 1))


def test_bounds_of_set_voxels():
    storage = VoxelStorage((10, 10, 10))
    storage.set((2, 5, 3))
    storage.set((4, 1, 7))
    lower, upper = storage.bounds()
    assert lower == make_vec(2, 1, 3)
    assert upper == make_vec(4, 5, 7)


def test_copy_is_independent():
    storage = _cube(1, 2)
    copied = storage.copy()
    copied.discard((1, 1, 1))
    assert storage.get((1, 1, 1))
    assert copied.count() == storage.count() - 1


def test_inverted_partitions_grid():
    storage = _cube(0, 1, extents=(3, 3, 3))
    inverted = storage.inverted()
    assert inverted.count() + storage.count() == 27
    assert not any(inverted.get(p) for p in storage)


def test_union_and_subtraction_round_trip():
    a = _cube(1, 2)
    b = _cube(2, 3)
    union = a.copy()
    union.boolean_union_inplace(b)
    assert set(union) == set(a) | set(b)
    union.boolean_subtraction_inplace(b)
    assert set(union) == set(a) - set(b)


def test_boolean_requires_same_extents():
    with pytest.raises(ValueError):
        VoxelStorage((4, 4, 4)).boolean_union_inplace(VoxelStorage((5, 5, 5)))


def test_progress_callbacks():
    class Identity(PostProcess):
        def __call__(self, storage):
            self.progress(0.5)
            return storage

    percentages, fractions = [], []
    process = Identity()
    process.set_progress_callback(percentages.append)
    process.set_application_progress_callback(fractions.append)
    storage = VoxelStorage((2, 2, 2))
    storage.set((1, 1, 1))
    result = process(storage)
    assert set(result) == {make_vec(1, 1, 1)}
    assert percentages == [50]
    assert fractions == [0.5]

    process.silent = True
    result = process(VoxelStorage((2, 2, 2)))
    assert result.count() == 0
    assert percentages == [50]
    assert fractions == [0.5, 0.5]


def test_edge_detect_removes_interior():
    storage = _cube(2, 4)
    edges = EdgeDetect()(storage)
    assert set(edges) == set(storage) - {make_vec(3, 3, 3)}


def test_edge_detect_isolated_voxel_is_not_an_edge():
    storage = VoxelStorage((5, 5, 5))
    storage.set((2, 2, 2))
    assert EdgeDetect()(storage).count() == 0


def test_edge_detect_output_is_subset_of_input():
    storage = _cube(1, 5)
    storage.discard((3, 3, 3))
    edges = EdgeDetect()(storage)
    assert set(edges) <= set(storage)
    assert edges.get((2, 3, 3))