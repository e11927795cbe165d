[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dotsetup"
version = "0.1.0"
description = "Install and link dotfiles and packages from YAML task files kept in a dotfiles repository"
requires-python = ">=3.10"
keywords = ["dotfiles", "setup", "installer", "yaml", "tasks"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
]
dependencies = [
    "pyyaml",
    "rich",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dotsetup = "dotsetup.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dotsetup"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
