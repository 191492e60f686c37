[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gembib"
version = "0.1.0"
description = "A small, forgiving XML parser and tree editor, with a tool that turns a Bible XML file into a Gemini capsule"
requires-python = ">=3.10"
dependencies = []
keywords = ["xml", "parser", "dtd", "entities", "gemini", "bible", "gemtext"]
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
    "Topic :: Text Processing :: Markup :: XML",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gembib-xml = "gembib.writer:main"
gembib-gemini = "gembib.gemini:main"

[tool.hatch.build.targets.wheel]
packages = ["gembib"]

[tool.hatch.build.targets.sdist]
include = ["gembib", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
