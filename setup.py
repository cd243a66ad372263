from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="gmwcs",
    version="0.3.0",
    author="gmwcs developers",
    description="Generalized maximum weight connected subgraph solver built on MILP.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=["networkx>=3.0", "pulp>=2.7,<4"],
    extras_require={"test": ["pytest"]},
)
