[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slugsim"
version = "0.1.0"
description = "Three-dimensional simulation of a migrating Dictyostelium slug built from deformable ellipsoidal cells"
requires-python = ">=3.10"
keywords = [
    "simulation",
    "cell migration",
    "dictyostelium",
    "slug",
    "ellipsoid",
    "biomechanics",
    "agent-based model",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
slugsim = "slugsim.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["slugsim"]

[tool.pytest.ini_options]
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
