[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xiangqi"
version = "6.3.0"
description = "Chinese chess (xiangqi) with local, computer and network play"
requires-python = ">=3.10"
dependencies = []
keywords = ["xiangqi", "chinese chess", "board game", "tkinter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xiangqi = "xiangqi.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["xiangqi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
