from setuptools import setup, find_packages

setup(
    name="cluster-installer",
    version="0.1.0",
    packages=find_packages(include=["cluster_installer", "cluster_installer.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cluster-installer=cluster_installer.cli:main",
        ],
    },
)
