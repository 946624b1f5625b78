[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hranoprovod"
version = "3.0.0"
description = "Command line diet and exercise tracker that works on plain text files"
requires-python = ">=3.10"
keywords = [
    "diet",
    "nutrition",
    "calories",
    "tracker",
    "food",
    "exercise",
    "plain-text",
    "command-line",
]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "python-dateutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hranoprovod-cli = "hranoprovod.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hranoprovod"]

[tool.pytest.ini_options]
addopts = "-ra"
