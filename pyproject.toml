[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "onevis"
version = "0.1.0"
description = "Reader and render-state model for .ONE volumetric scene files"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["volume rendering", "voxels", "3d textures", "scene format", "visualization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
onevis = "onevis.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["onevis"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
