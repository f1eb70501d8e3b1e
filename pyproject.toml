[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rlpkit"
version = "0.1.0"
description = "Recursive Length Prefix encoding and decoding with fixed-width unsigned integers, fixed-size hashes and hex helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["rlp", "serialization", "encoding", "uint256", "hash", "hex"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rlpkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
