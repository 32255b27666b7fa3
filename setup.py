# Optional environment variables supported by setup.py:
#   RELEASE_VERSION
#     overrides the version read from version.txt.
#
#   PROJECT_NAME
#     overrides the distribution name.

import os

from setuptools import find_packages, setup

root_dir = os.path.dirname(os.path.abspath(__file__))

classifiers = [
    "Development Status :: 4 - Beta",
    "Topic :: Scientific/Engineering",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Games/Entertainment :: Simulation",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: Apache Software License",
    "Programming Language :: Python :: 3.8",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
]


def get_version():
    if os.getenv("RELEASE_VERSION"):
        version = os.environ["RELEASE_VERSION"]
    else:
        version_file = os.path.join(root_dir, "version.txt")
        with open(version_file, "r") as f:
            version = f.read().strip()
    return version.lstrip("v")


project_name = os.getenv("PROJECT_NAME", "taichi-conway")
version = get_version()

# Our python package root dir is python/
package_dir = "python"
packages = find_packages(package_dir)

setup(
    name=project_name,
    packages=packages,
    package_dir={"": package_dir},
    version=version,
    description="Conway's Game of Life on the GPU, written in Taichi",
    python_requires=">=3.8,<4.0",
    install_requires=[
        "taichi>=1.6",
        "numpy",
        "colorama",
        "rich",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    keywords=["graphics", "simulation", "cellular automaton"],
    license="Apache Software License (http://www.apache.org/licenses/LICENSE-2.0)",
    entry_points={
        "console_scripts": [
            "conway=conway._main:main",
        ],
    },
    classifiers=classifiers,
)
