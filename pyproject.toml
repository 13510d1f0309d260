[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cericc"
version = "0.1.0"
description = "Compiler from a small Pascal-like structured language to x86-64 GNU assembly"
requires-python = ">=3.10"
keywords = ["compiler", "pascal", "assembly", "x86-64", "lexer", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cericc = "cericc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cericc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
