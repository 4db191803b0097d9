[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxec"
version = "0.1.0"
description = "Voxel grid vectors, post-processing operations, flood-fill traversal and voxelfile parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "flood fill", "morphology", "grid", "parser"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxec"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
