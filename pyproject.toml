[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "datashares"
version = "0.1.0"
description = "Split transactions and blobs into fixed-size namespaced shares and parse shares back into them."
requires-python = ">=3.10"
dependencies = []
keywords = ["shares", "namespace", "blob", "data availability", "encoding", "varint"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["datashares"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
