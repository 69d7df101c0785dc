[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "envspec"
version = "0.1.0"
description = "Declarative, validated environment variable specifications."
requires-python = ">=3.10"
dependencies = []
keywords = ["environment", "configuration", "validation", "env", "settings"]
classifiers = [
    "Development Status :: 4 - Beta",
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

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["envspec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
