[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matrixmail"
version = "0.1.0"
description = "Matrix bot that answers chat commands with OpenAI-compatible prompts and formats e-mail messages for a room"
requires-python = ">=3.10"
keywords = ["matrix", "bot", "email", "openai", "chat"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "httpx>=0.25",
    "pyyaml>=6.0",
    "markdown>=3.4",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[project.scripts]
matrixmail = "matrixmail.app:main"

[tool.hatch.build.targets.wheel]
packages = ["matrixmail"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
