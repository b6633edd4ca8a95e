[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatbye"
version = "0.1.0"
description = "Local-network chat server with JSON messages, length-prefixed TCP framing and UDP discovery"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "lan", "tcp", "udp", "multicast", "discovery", "json", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
chatbye-server = "chatbye.server:main"

[tool.hatch.build.targets.wheel]
packages = ["chatbye"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
