from setuptools import find_packages, setup

with open("README.md", "r") as fp:
    LONG_DESCRIPTION = fp.read()

setup(
    name="argtok",
    version="0.1.0",
    description="Shell-like argument tokenizer driven by a generic table-driven state machine",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click >= 8.0",
        "structlog >= 22.1",
    ],
    python_requires=">=3.8",
    extras_require={
        "test": [
            # Pytest
            "pytest >= 7",
            "pytest-cov",
            "hypothesis",
        ],
        "dev": ["black"],
    },
    entry_points={
        "console_scripts": [
            "argtok = argtok.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
    ],
)
