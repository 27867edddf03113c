[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "stackmerge"
version = "0.1.0"
description = "Load, import-resolve and deep-merge YAML stack configurations for Terraform and helmfile components"
requires-python = ">=3.10"
keywords = ["yaml", "stacks", "terraform", "helmfile", "configuration", "deep-merge"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml>=6.0",
    "termcolor>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.setuptools.packages.find]
include = ["stackmerge*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
