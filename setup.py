"""
Setup script for dashboard-plugins-api-hub.

The API hub sits between the dashboard and its plugin datasets. It serves
two roles:

1. Token Exchange - Trade a dashboard Supabase session for an API token
2. Plugin Gateway - Authenticated reads and mastery aggregation over the
   math plugin dataset

Run the server with `plugin-hub` or `uvicorn main:app`.
"""

from setuptools import find_packages, setup

setup(
    name="dashboard-plugins-api-hub",
    version="1.0.0",
    description="Authenticated API gateway for dashboard plugin datasets",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Dashboard Plugins",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        # API
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Auth
        "PyJWT>=2.8.0",
        # Timestamps
        "python-dateutil>=2.8.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "plugin-hub=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="api gateway supabase mastery education",
)
