[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sakuracloud_exporter"
version = "0.1.0"
description = "Prometheus-style metric collectors for SAKURA Cloud resources"
requires-python = ">=3.10"
dependencies = []
keywords = ["prometheus", "exporter", "metrics", "monitoring", "sakuracloud"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sakuracloud_exporter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
