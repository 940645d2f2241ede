[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pwrxe"
version = "0.1.0"
description = "PowerPC instruction decoder, CPU register model and TLB-backed big-endian memory system"
requires-python = ">=3.10"
dependencies = []
keywords = ["powerpc", "ppc", "emulator", "decoder", "tlb", "instruction-set"]
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
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Disassemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pwrxe = "pwrxe.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pwrxe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
