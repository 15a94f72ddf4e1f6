[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachokern"
version = "0.1.0"
description = "A small instructional operating-system kernel: cooperative threads, a FIFO scheduler, semaphores, a synchronous console and system-call handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "operating-system", "threads", "scheduler", "semaphore", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System Kernels",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nachokern = "nachokern.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["nachokern"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
