"""
Setup script for the TMR document service.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="tmr-document-service",
    version="1.0.0",
    packages=find_packages(include=["document_service", "document_service.*", "document_client", "document_client.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "python-multipart>=0.0.9",
        "supabase>=2.3",
        "requests>=2.31",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-mock>=3.12",
            "httpx>=0.25",
        ],
    },
)
