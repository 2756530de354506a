[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "brotenc"
version = "0.1.0"
description = "Building blocks of a Brotli-format encoder: prefix codes, commands, bit-stream writing, Huffman tree storage and block splitting"
requires-python = ">=3.10"
dependencies = []
keywords = ["brotli", "compression", "encoder", "huffman", "bitstream"]
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
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["brotenc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
