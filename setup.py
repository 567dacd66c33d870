#!/usr/bin/env python3
"""
Setup script for the ICMS Admin API

Install with:
    pip install -e .

With test tooling:
    pip install -e ".[test]"
"""

from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

# Service dependencies
requirements = [
    "fastapi>=0.109.0",
    "uvicorn[standard]>=0.27.0",
    "sqlalchemy[asyncio]>=2.0.25",
    "asyncpg>=0.29.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "python-jose[cryptography]>=3.3.0",
    "python-multipart>=0.0.6",
    "boto3>=1.34.0",
    "python-dotenv>=1.0.0",
]

test_requirements = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.23.0",
    "httpx>=0.26.0",
    "aiosqlite>=0.19.0",
    "faker>=22.0.0",
]

setup(
    name="icms-admin-api",
    version="1.0.0",
    description="ICMS Admin API - dashboard analytics, TTL cache and media storage",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="ICMS Team",
    license="MIT",
    # backend/app has no __init__.py, so discover it as a namespace package
    package_dir={"": "backend"},
    packages=find_namespace_packages(where="backend", include=["app", "app.*"]),
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
        "dev": test_requirements + [
            "black>=24.1.0",
            "isort>=5.13.0",
            "mypy>=1.8.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="fastapi dashboard analytics cache s3 media",
)
