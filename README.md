# voxec

Building blocks for working with regular voxel grids in plain Python. The package
has no runtime dependencies.

## Modules

- `voxec.vec` has `Vec`, an immutable, hashable vector of numbers.
  - Arithmetic (`+`, `-`, `*`, `//`, `/`, `%`, unary `-` and `+`) works element-wise
    with another vector of the same length or with a scalar.
  - The comparisons `equal`, `not_equal`, `less`, `greater`, `less_equal` and
    `greater_equal` return vectors of booleans. `==` compares whole vectors.
  - Reductions and helpers include `all`, `any`, `sum`, `dot`, `abs`, `floor`, `ceil`,
    `maximum`, `minimum`, `max_element`, `min_element`, `astype`, `replace` and `format`.
  - `ceil_div` and `floor_div` do integer division and raise `TypeError` for
    non-integral values.
  - `cross` gives a scalar for 2-vectors and a vector for 3-vectors.
  - The module also has `make_vec`, `integer_ceil_div` and `integer_floor_div`.
- `voxec.progress` has three names:
  - `ProgressBar` writes a `#` bar (`ProgressStyle.BAR`) or a run of dots
    (`ProgressStyle.DOTS`) to a stream, which is standard error by default.
  - `ApplicationProgress` combines weighted phases into one overall fraction that it
    passes to a callback.
  - `ApplicationProgress` can be used as a context manager. On exit it reports the start
    of the last phase.
- `voxec.voxelfile` has `parse_voxelfile`, a parser for voxelfile scripts.
  - A script holds statements of the form `name = call(args)` and `function ... return`
    definitions.
  - The parser returns `Statement` and `FunctionDef` objects. Their arguments are
    `FunctionArg` values inside a `FunctionCall`.
  - An argument value is a float, a 32-bit int, a quoted string (kept with its quotes),
    an identifier, or a tuple of quoted strings written as `{...}`.
  - Input that does not parse to its end raises `VoxelfileSyntaxError`, which carries the
    offset where parsing stopped.
- `voxec.postprocess` has the following:
  - `VoxelStorage` is a sparse grid of fixed extents. Each voxel is either a plain bit or
    an unsigned 32-bit value. The grid has `get`, `set`, `value`, `discard`, `count`,
    `bounds`, `copy`, `empty_copy`, `inverted`, `boolean_union_inplace` and
    `boolean_subtraction_inplace`.
  - `PostProcess` is the base class for operations, with progress callbacks.
  - `EdgeDetect` keeps the set voxels that have both set and unset neighbours.
- `voxec.morphology` has two operations:
  - `FillGaps` sets unset voxels that lie between two set voxels along an axis.
  - `Offset` sets the one-voxel shell around the set voxels, in 3D or within z layers
    (`dimensions=2`).
- `voxec.transform` has two operations:
  - `Shift` translates voxels and drops those that fall outside the grid.
  - `Sweep` extrudes voxels along a single axis. The extrusion length can be scaled by
    32-bit voxel values, stopped by an `until` storage, or capped by `max_depth`.
    Non-orthogonal directions raise `ValueError`.
- `voxec.traversal` has the following:
  - `Visitor` is a flood fill with 6 (breadth first) or 26 (nearest first)
    connectedness, an optional `max_depth` and an optional `post_condition`. It reports
    each voxel it visits as a `TaggedIndex`.
  - `query_leftmost` returns the leftmost set voxel, and `connected_components` yields
    each 6-connected component.
  - `KeepOutmost` keeps the component that contains the leftmost set voxel.
  - `TraversalVoxelFiller`, `TraversalVoxelFillerSeparateComponents`,
    `TraversalVoxelFillerInverse` and `TraversalVoxelFillerInverted` fill enclosed
    volumes or exterior regions. When there is not enough padding, or the seed is
    unsuitable, they raise `ValueError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from voxec.vec import Vec, make_vec

a = make_vec(1, 2, 3)
b = Vec(1, 2, 4)
print((a + 1).format())                             # (2, 3, 4)
print(a.less(b).any())                              # True
print(a.maximum(make_vec(0, 0, 4)).format(False))   # 1 2 4
```

```python
from voxec.postprocess import VoxelStorage
from voxec.morphology import FillGaps

grid = VoxelStorage((10, 10, 10))
for pos in VoxelStorage.box((2, 2, 2), (4, 4, 4)):
    if pos != (3, 3, 3):
        grid.set(pos)
print(FillGaps()(grid).get((3, 3, 3)))   # True
```

```python
from voxec.voxelfile import parse_voxelfile

program = parse_voxelfile('file = parse("model.ifc")\nvoxels = voxelize(file)\n')
for statement in program:
    print(statement.assignee, statement.call.name)
```

## What it does not do

- There is no command-line program.
- Parsed voxelfile scripts are not executed.
- Geometry is not turned into voxels.
- Grids live only in memory: there is no chunked or memory-mapped storage, and grids
  cannot be written to files.
- Operations run in a single thread.