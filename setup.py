"""Setup configuration for the NodeArmy registry."""

from setuptools import find_packages, setup

setup(
    name="nodearmy",
    version="0.1.0",
    description="Fee-gated node membership registry with tiers, merit and boosts",
    author="NodeArmy Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "web3>=6.0",
        "eth-account>=0.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
        ],
        "dev": [
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "nodearmy=nodearmy.cli:main",
        ]
    },
)
