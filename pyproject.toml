[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tanktrouble"
version = "0.1.0"
description = "Game model and client-side wire protocol for a networked maze tank battle game"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "tank", "maze", "protocol", "multiplayer"]
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
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tanktrouble"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
