[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shopapi"
version = "0.1.0"
description = "User accounts API for a shop backend: registration, profiles and password changes over HTTP, with database, cache and paging helpers."
requires-python = ">=3.10"
keywords = ["flask", "rest", "api", "users", "authentication", "sqlalchemy", "redis", "pagination"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Typing :: Typed",
]
dependencies = [
    "flask>=2.3",
    "sqlalchemy>=2.0",
    "redis>=4.5",
    "bcrypt>=4.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[tool.hatch.build.targets.wheel]
packages = ["shopapi"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
