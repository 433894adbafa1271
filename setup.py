"""
Setup script for package installation
"""
from setuptools import setup, find_packages

setup(
    name="agerapp-api",
    version="1.0.0",
    description="AgerApp small-business backend: inventory, customers, invoices, blogs and communities",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10,<3.14",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy>=2.0",
        "alembic>=1.13",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "python-jose[cryptography]>=3.3",
        "passlib>=1.7.4",
        "bcrypt>=4.0",
        "python-dotenv>=1.0",
        "httpx>=0.26",
        "python-multipart>=0.0.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
