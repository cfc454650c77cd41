[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvschema"
version = "0.1.0"
description = "Field schemas and expand/flatten converters between configuration blocks and KubeVirt virtual machine objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubevirt", "kubernetes", "virtual-machine", "schema", "configuration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kvschema"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
