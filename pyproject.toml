[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netproc"
version = "0.1.0"
description = "Per-process network traffic accounting: IPv4 packet decoding, rate statistics, process mapping and background host name resolution"
requires-python = ">=3.10"
dependencies = []
keywords = ["network", "monitoring", "traffic", "process", "bandwidth", "linux"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["netproc"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
