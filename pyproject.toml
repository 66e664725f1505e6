[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "saltpatch"
version = "0.5.0"
description = "Build, read and verify SALTPTCH firmware patch files, with byte-order and Boyer-Moore search helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["firmware", "patch", "diff", "binary", "boyer-moore", "sha1"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["saltpatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
