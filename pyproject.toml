[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lingot"
version = "1.0.0"
description = "Configuration files, musical scales, a message queue and pitch estimation for a musical instrument tuner"
requires-python = ">=3.10"
dependencies = []
keywords = ["tuner", "pitch", "scala", "scale", "fundamental frequency", "music"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lingot"]

[tool.pytest.ini_options]
addopts = "-ra"
