[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dockkit"
version = "0.1.0"
description = "Container image tooling: inspect images for secrets and Dockerfile history, wrap images as launchers, and build ping jobs"
requires-python = ">=3.10"
dependencies = [
    "termcolor",
]
keywords = ["docker", "container", "image", "secrets", "layers", "kubernetes", "zipapp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
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
    "Topic :: Security",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
imageinfo = "dockkit.imageinfo:main"
docker2exe = "dockkit.docker2exe:main"

[tool.hatch.build.targets.wheel]
packages = ["dockkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
