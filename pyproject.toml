[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtuframe"
version = "0.1.0"
description = "Encode and decode Modbus RTU Read Holding Registers frames for masters and slaves"
requires-python = ">=3.10"
dependencies = []
keywords = ["modbus", "rtu", "crc16", "holding registers", "embedded", "protocol"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rtuframe-example = "rtuframe.example:main"
rtuframe-sim = "rtuframe.sim:main"

[tool.hatch.build.targets.wheel]
packages = ["rtuframe"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
