[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cgutils"
version = "0.1.0"
description = "Utility toolkit: work-stealing thread pool, task groups, thread-safe queues, LRU cache, trie, timer, singleton, random vectors and vector distances."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "thread-pool",
    "work-stealing",
    "task-group",
    "queue",
    "lru",
    "trie",
    "timer",
    "singleton",
    "distance",
    "concurrency",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cgutils-demo = "cgutils.demos:main"

[tool.hatch.build.targets.wheel]
packages = ["cgutils"]

[tool.hatch.build.targets.sdist]
include = ["cgutils", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
