from setuptools import setup, find_packages
from pathlib import Path

def parse_requirements(filename):
    return [line.strip() for line in Path(filename).read_text().splitlines()
            if line.strip() and not line.startswith("#")]

setup(
    name="maaconsole",
    version="0.1.0",
    description="Client-side sync and dispatch layer of the emulator/MAA control console",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=parse_requirements("requirements.txt"),
    extras_require={"dev": parse_requirements("requirements-test.txt")},
    entry_points={
        "console_scripts": [
            "maaconsole=maaconsole.__main__:main",
        ],
    },
)
