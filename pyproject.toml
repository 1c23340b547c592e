[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "planetsim"
version = "0.1.0"
description = "A small layered rendering engine with OBJ model loading, textures, a fly camera and an event system"
requires-python = ">=3.10"
keywords = ["rendering", "3d", "engine", "obj", "camera", "events", "layers"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
planetsim = "planetsim.app_layer:main"

[tool.hatch.build.targets.wheel]
packages = ["planetsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
