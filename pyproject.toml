[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mochasettings"
version = "0.1.0"
description = "Read and write the Mocha window manager's .mconf settings files, with a JSON message bridge for a web settings page"
requires-python = ">=3.10"
dependencies = []
keywords = ["mocha", "window-manager", "settings", "configuration", "keybinds", "theme"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mochasettings"]

[tool.hatch.build.targets.sdist]
include = ["mochasettings", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
