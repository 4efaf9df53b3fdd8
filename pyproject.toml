[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cborkit"
version = "0.1.0"
description = "Dependency-free encoders for CBOR (RFC 8949) data items and semantic tags"
requires-python = ">=3.10"
dependencies = []
keywords = ["cbor", "rfc8949", "serialization", "encoding", "binary"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["cborkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
