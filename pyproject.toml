[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "celestia_types"
version = "0.1.0"
description = "Celestia data types and validation: namespaces, shares, blobs, share commitments, headers and fraud proofs."
requires-python = ">=3.10"
keywords = [
    "celestia",
    "nmt",
    "namespaced merkle tree",
    "blob",
    "share commitment",
    "light client",
    "data availability",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["celestia_types"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
