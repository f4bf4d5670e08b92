[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kisstnc"
version = "0.1.0"
description = "KISS TNC host-side protocol handling: frame escaping, parsing and configuration commands"
requires-python = ">=3.10"
dependencies = []
keywords = ["kiss", "tnc", "ax25", "packet-radio", "ham-radio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kisstnc = "kisstnc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kisstnc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
