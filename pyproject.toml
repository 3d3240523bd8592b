[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindlang"
version = "0.1.0"
description = "Syntax trees, diagnostic rendering and back-end code generation for the Kind language"
requires-python = ">=3.10"
keywords = ["compiler", "kind", "kindelia", "hvm", "diagnostics", "type theory"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]
dependencies = [
    "pycryptodome",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kindlang"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
