[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shifttally"
version = "0.1.0"
description = "A small terminal work-time tracker with clock in/out, breaks, legal break rules and plain-text daily logs"
requires-python = ">=3.10"
dependencies = []
keywords = ["time tracking", "work hours", "timesheet", "breaks", "clock in"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shifttally = "shifttally.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["shifttally"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
