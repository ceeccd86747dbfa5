"""
Setup script for the geohistory-trivia package.

Installs the inference routing layer (providers, configuration resolver,
model discovery) and the game operations built on it.
"""

from setuptools import setup, find_packages

setup(
    name="geohistory-trivia",
    version="1.0.0",
    description="GeoHistory trivia - LLM provider routing for quiz generation and coaching",
    author="GeoHistory Team",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "httpx>=0.25.0",
        "anthropic>=0.40.0,<1.0",
        "google-genai>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
        "dev": [
            "pytest>=7.4",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "geohistory=geohistory.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
