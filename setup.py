import pathlib
import re
import sys

from setuptools import find_packages, setup


__license__ = "BSD-3"
__status__ = "Alpha"

# Check Python version, no point installing if unsupported version inplace
min_version = (3, 10)
if sys.version_info < min_version:
    py_version = ".".join(str(n) for n in sys.version_info)
    msg = (
        f"Python-{'.'.join(map(str, min_version))} or greater is required, "
        f"Python-{py_version} used."
    )
    raise RuntimeError(msg)


short_description = "Transformation, simulation and statistics for multiple sequence alignments"

root = pathlib.Path(__file__).parent
readme_path = root / "README.md"

long_description = readme_path.read_text()

PACKAGE_DIR = "src"

version_text = (root / PACKAGE_DIR / "msaforge" / "_version.py").read_text()
__version__ = re.search(r'__version__ = "([^"]+)"', version_text).group(1)

setup(
    name="msaforge",
    version=__version__,
    description=short_description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms=["any"],
    license=__license__,
    keywords=[
        "biology",
        "genomics",
        "bioinformatics",
        "sequence alignment",
        "simulation",
    ],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.10",
    packages=find_packages(where=PACKAGE_DIR),
    package_dir={"": PACKAGE_DIR},
    install_requires=[
        "numpy",
        "numba>0.53",
        "scitrack",
        "typing_extensions",
    ],
    extras_require={
        "test": [
            "nox",
            "pytest",
            "pytest-cov",
        ],
    },
)
