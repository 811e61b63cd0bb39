[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcpbridge"
version = "1.0.0b1"
description = "Bridge a stdio MCP client to a streamable HTTP MCP gateway"
requires-python = ">=3.10"
keywords = ["mcp", "model-context-protocol", "json-rpc", "stdio", "sse", "gateway", "proxy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "httpx>=0.27",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=8",
    "pytest-asyncio>=0.23",
]

[project.scripts]
mcpbridge = "mcpbridge.main:main"

[tool.hatch.build.targets.wheel]
packages = ["mcpbridge"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
