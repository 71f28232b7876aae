from setuptools import setup, find_packages

setup(
    name = "tika-metadata",
    version = "0.1.0",
    packages = find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pony",
        "pydantic>=2.0",
        "python-dotenv",
        "PyYAML",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "tika-metadata=tika_metadata.cli:main",
        ],
    },
    python_requires = ">=3.9",
)
