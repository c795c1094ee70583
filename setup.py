#!/usr/bin/env python3
"""
Setup script for the Summation Accuracy Benchmarks

This script builds the Python package that measures the accuracy and
running time of dot-product accumulation algorithms against an
arbitrary-precision reference.
"""

from pathlib import Path

from setuptools import setup, find_packages

# Package metadata
PACKAGE_NAME = "sumbench"
VERSION = "1.0.0"
DESCRIPTION = "Accuracy and timing benchmarks for compensated and exact dot-product summation"
AUTHOR = "Summation Benchmark Contributors"
AUTHOR_EMAIL = "contributors@sumbench.org"
URL = "https://github.com/your-username/sumbench"
LICENSE = "MIT"

# Read long description from README
def read_readme():
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return DESCRIPTION

# Package requirements
def get_requirements():
    """Get package requirements."""
    base_requirements = [
        "numpy>=1.19.0",
        "torch>=1.9.0",
        "mpmath>=1.2.0",
        "pandas>=1.1.0",
    ]

    dev_requirements = [
        "pytest>=6.0",
        "pytest-cov>=2.0",
        "black>=21.0",
        "flake8>=3.8",
        "mypy>=0.900",
        "matplotlib>=3.3",
    ]

    return {
        "base": base_requirements,
        "dev": dev_requirements,
    }

# Setup configuration
def main():
    """Main setup function."""
    requirements = get_requirements()

    # Extras require for optional dependencies
    extras_require = {
        "dev": requirements["dev"],
        "test": ["pytest>=6.0", "pytest-cov>=2.0"],
        "all": requirements["dev"],
    }

    setup(
        name=PACKAGE_NAME,
        version=VERSION,
        description=DESCRIPTION,
        long_description=read_readme(),
        long_description_content_type="text/markdown",
        author=AUTHOR,
        author_email=AUTHOR_EMAIL,
        url=URL,
        license=LICENSE,

        # Package configuration
        packages=find_packages(include=["sumbench", "sumbench.*"]),

        # Dependencies
        install_requires=requirements["base"],
        extras_require=extras_require,
        python_requires=">=3.8",

        # Console entry point
        entry_points={
            "console_scripts": [
                "sumbench=sumbench.cli:main",
            ],
        },

        # Metadata for PyPI
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Science/Research",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.13",
            "Topic :: Scientific/Engineering :: Mathematics",
            "Topic :: Software Development :: Testing",
            "Operating System :: OS Independent",
        ],
        keywords=[
            "numerical", "summation", "kahan", "floating-point", "fma",
            "error-free-transformation", "dot-product", "benchmark"
        ],

        # Project URLs
        project_urls={
            "Source": URL,
            "Tracker": f"{URL}/issues",
        },

        zip_safe=False,
    )

if __name__ == "__main__":
    main()
