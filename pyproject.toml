[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xeol"
version = "0.1.0"
description = "Building blocks for an end-of-life software database: store, listing, metadata and distro detection"
requires-python = ">=3.10"
keywords = ["eol", "end-of-life", "security", "sqlite", "linux-distribution"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xeol"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
