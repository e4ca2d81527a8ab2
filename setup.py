"""Setup script for Hotel Search."""
from setuptools import setup, find_namespace_packages

setup(
    name="hotel-search",
    version="1.0.0",
    description="Hotel directory, special pricing and geospatial search service",
    packages=find_namespace_packages(include=["hotelsearch", "hotelsearch.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "sqlalchemy>=2.0",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "aiohttp>=3.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.26",
        ],
    },
)
