[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "idskit"
version = "1.0.0"
description = "Snort-style rule compiler, packet dissector and IDS support toolkit"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ids",
    "intrusion-detection",
    "snort",
    "rules",
    "packet-capture",
    "network",
    "hexdump",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
idskit-rule2bin = "idskit.rule2bin_cli:main"
idskit-capture = "idskit.capture:main"

[tool.hatch.build.targets.wheel]
packages = ["idskit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
