from setuptools import setup, find_packages

setup(
    name="shellcraft",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "shellcraft=shellcraft.cli:main",
        ],
    },
    description="Round-trip-safe editing of shell startup files and git config.",
)
