[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "novastack"
version = "0.1.0"
description = "Networking and security toolkit: packet decoding, an in-memory interface stack, DHCP and DNS clients, AES encryption and access control"
requires-python = ">=3.10"
keywords = [
    "networking",
    "ethernet",
    "arp",
    "tcp",
    "udp",
    "dhcp",
    "dns",
    "firewall",
    "encryption",
    "access-control",
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
    "Topic :: System :: Networking",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
netmgr = "novastack.netmgr:main"

[tool.hatch.build.targets.wheel]
packages = ["novastack"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
