[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pessimism"
version = "0.1.0"
description = "Alert routing, identifiers and HTTP API for heuristic monitoring of OP Stack and EVM compatible blockchains."
requires-python = ">=3.10"
keywords = [
    "monitoring",
    "ethereum",
    "evm",
    "op-stack",
    "alerting",
    "heuristics",
    "pagerduty",
    "slack",
    "json-rpc",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Typing :: Typed",
]
dependencies = [
    "requests>=2.28",
    "python-dotenv>=1.0",
    "pycryptodome>=3.17",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["pessimism"]

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
