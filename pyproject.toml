[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kxctl"
version = "0.1.0"
description = "Run kubectl commands across many Kubernetes contexts at once, filtered by name."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "kubectl", "contexts", "cli", "multi-cluster"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kxctl = "kxctl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kxctl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
