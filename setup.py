from setuptools import find_packages, setup

setup(
    name="bread-scheme",
    version="0.1.0",
    description="Streaming S-expression reader, printer and REPL",
    python_requires=">=3.10",
    packages=find_packages(include=["bread", "bread.*"]),
    entry_points={
        "console_scripts": [
            "bread = bread.cli:main",
        ],
    },
)
