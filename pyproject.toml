[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "phoenixengine"
version = "0.1.0"
description = "Scene, entity, event and profiling core of a small 2D game engine"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pyyaml",
]
keywords = ["game engine", "ecs", "scene", "entity", "events", "profiling", "yaml", "shader"]
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
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["phoenixengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
