[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gnmistream"
version = "0.1.0"
description = "gNMI-style typed values, a file watcher interface, and subscription responses and statistics for telemetry streaming."
requires-python = ">=3.10"
dependencies = []
keywords = ["gnmi", "telemetry", "subscribe", "network-monitoring", "typed-value"]
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
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gnmistream"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
