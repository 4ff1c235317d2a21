[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "haclog"
version = "0.1.0"
description = "Per-thread byte ring buffers and a shared context for a buffered logger, plus path, OS and synchronisation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "ring buffer", "threads", "spinlock", "paths"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["haclog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
