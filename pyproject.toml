[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neander"
version = "0.1.0"
description = "Toolchain for the Neander teaching computer: a small expression compiler, a two-pass assembler and a simulator"
requires-python = ">=3.10"
dependencies = []
keywords = ["neander", "assembler", "compiler", "simulator", "education", "computer-architecture"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Software Development :: Assemblers",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
neander-cc = "neander.compiler:main"
neander-asm = "neander.assembler:main"
neander-run = "neander.simulator:main"

[tool.hatch.build.targets.wheel]
packages = ["neander"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
