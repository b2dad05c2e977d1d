[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xuul"
version = "0.1.0"
description = "An HTTP API service bundling hashing, hot-search, weather, website-info and other lookup endpoints behind one JSON envelope"
requires-python = ">=3.10"
keywords = ["api", "fastapi", "http", "hot-search", "weather", "redis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: FastAPI",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "fastapi",
    "uvicorn",
    "httpx",
    "redis",
    "sqlalchemy",
    "beautifulsoup4",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
xuul = "xuul.app:main"

[tool.hatch.build.targets.wheel]
packages = ["xuul"]

[tool.pytest.ini_options]
addopts = "-ra"
