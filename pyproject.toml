[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shardflow"
version = "0.1.0"
description = "Building blocks for sharded actor runtimes: addressing, messages, column batches, path EOS tracking, task queues, promise pools and option parsing."
requires-python = ">=3.10"
dependencies = []
keywords = ["actor", "sharding", "dataflow", "scheduling", "column-batch", "distributed"]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["shardflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
