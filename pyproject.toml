[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sriovnet"
version = "0.1.0"
description = "SR-IOV network resource model: node policies, node state merging, NIC id checks and CNI render data"
requires-python = ">=3.10"
dependencies = []
keywords = ["sriov", "networking", "cni", "kubernetes", "virtual-functions"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sriovnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
