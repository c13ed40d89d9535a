[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mevkit"
version = "0.1.0"
description = "Building blocks for Sui searchers: Shio auction feed, bid signing, simulation types and chain utilities"
requires-python = ">=3.10"
keywords = ["sui", "mev", "shio", "auction", "bid", "ed25519", "searcher"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "websockets>=12.0",
    "httpx>=0.27",
    "pynacl>=1.5",
]

[project.optional-dependencies]
test = [
    "pytest>=8.0",
    "pytest-asyncio>=0.23",
]

[project.scripts]
mevkit-version = "mevkit.version:main"

[tool.hatch.build.targets.wheel]
packages = ["mevkit"]

[tool.hatch.build.targets.sdist]
include = ["mevkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
