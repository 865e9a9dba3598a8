[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rngcores"
version = "0.1.0"
description = "HC-128, ISAAC and ISAAC-64 random number generators and a timing-jitter entropy collector"
requires-python = ">=3.10"
dependencies = []
keywords = ["random", "rng", "hc128", "isaac", "isaac64", "jitter", "entropy"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rngcores"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
