# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="zettelbuilder",
    version="0.1.0",
    description="Static site builder and live-reloading dev server for a directory of notes",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["zettelbuilder*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "watchdog",
        "markdown",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "zettelbuilder=zettelbuilder.main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
