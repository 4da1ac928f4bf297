"""Setup configuration for Gatewatch."""

from setuptools import setup, find_packages

with open("docs/README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="gatewatch",
    version="0.1.0",
    description="Rail grade crossing gate closing predictor from GTFS-Realtime feeds",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.25.0",
        "gtfs-realtime-bindings>=0.0.7",
        "protobuf>=3.17.0",
        "PyYAML>=5.4",
        "tzdata",
    ],
    extras_require={
        "dev": ["pytest>=6.0", "black", "flake8"],
    },
)
