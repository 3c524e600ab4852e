[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "backplane-status"
version = "0.1.0"
description = "Component status reporting and condition tracking for a multicluster engine operator"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "operator", "status", "conditions", "multicluster"]
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
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["backplane_status"]

[tool.pytest.ini_options]
addopts = "-ra"
