[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "holytls"
version = "0.1.0"
description = "Chrome-shaped HTTP/2 request building: header ordering, client hints, SETTINGS profiles and session plumbing"
requires-python = ">=3.10"
keywords = ["http2", "chrome", "fingerprint", "headers", "client-hints", "sec-ch-ua"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "h2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["holytls"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
