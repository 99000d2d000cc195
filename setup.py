"""
Setup script for acetrainer.

acetrainer is a terminal study companion for entrance exam preparation.
It serves two roles:

1. Trainer - flashcards, matching and timed races over vocabulary batches
2. Tracker - practice exams, XP, per-item mastery and a mistake registry

The 'acetrainer' command is the entry point; 'python -m acetrainer' also works.
"""

from setuptools import find_packages, setup

setup(
    name="acetrainer",
    version="1.0.0",
    description="Terminal exam preparation trainer with gamified vocabulary practice",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="acetrainer contributors",
    packages=find_packages(include=["acetrainer", "acetrainer.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
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
            "acetrainer=acetrainer.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="exam-prep vocabulary flashcards quiz cli education",
)
