#!/usr/bin/env python3
"""
Setup script for env-guard
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="env-guard",
    version="1.0.0",
    description="Secure, encrypted, local-only environment variable manager",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.1",
        "cryptography>=41.0",
        "pydantic>=2.0",
        "structlog>=23.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "env-guard=env_guard.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
