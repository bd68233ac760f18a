[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picocoap"
version = "0.1.0"
description = "Parse and build CoAP messages directly on their binary form"
requires-python = ">=3.10"
dependencies = []
keywords = ["coap", "iot", "protocol", "rfc7252", "constrained"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["picocoap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
