from setuptools import setup, find_packages

from pigcs2.__version__ import __version__

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()


extras_dev = [
  "pytest",
  "pytest-timeout",
  "pylint",
  "mypy",
  "types-pyserial",
]

extras_all = extras_dev

setup(
  name="pigcs2",
  version=__version__,
  packages=find_packages(),
  description="Client for PI motion controllers that speak GCS 2.0",
  long_description=long_description,
  long_description_content_type="text/markdown",
  install_requires=["typing_extensions", "pyserial"],
  package_data={"pigcs2": ["version.txt"]},
  extras_require={
    "dev": extras_dev,
    "all": extras_all,
  },
)
