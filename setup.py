from setuptools import find_packages, setup

setup(
    name="graphstats",
    version="0.1.0",
    packages=find_packages(include=["graphstats", "graphstats.*"]),
    package_data={"graphstats": ["config.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "networkx>=3.0",
        "numpy>=1.24",
        "scipy>=1.10",
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "prometheus_client>=0.17",
        "typer>=0.9",
        "matplotlib>=3.6",
        "scikit-learn>=1.2",
    ],
    extras_require={
        "test": ["pytest>=7.0", "hypothesis>=6.0"],
    },
    entry_points={
        "console_scripts": ["graphstats=graphstats.cli:app_cli"],
    },
)
