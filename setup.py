from setuptools import setup, find_packages

# Read requirements
with open("requirements.txt") as f:
    required = [line for line in f.read().splitlines() if line and not line.startswith("#")]

setup(
    name="dronedispatch",
    version="0.1",
    packages=find_packages(include=["dronedispatch", "dronedispatch.*"]),
    include_package_data=True,
    install_requires=required,
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "dronedispatch=dronedispatch.main:main",
        ],
    },
)
