[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "romarin"
version = "0.1.0"
description = "Graph-structured neural transistor models, compact MOSFET physics models and Verilog-A code generation"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mosfet", "verilog-a", "neural-network", "compact-model", "device-modeling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["romarin"]

[tool.pytest.ini_options]
addopts = "-ra"
