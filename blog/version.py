# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT
from importlib.metadata import PackageNotFoundError, version as _distribution_version
# File for tracking the application version

DISTRIBUTION_NAME = "markdown-blog-frontend"

def _resolve_version() -> str:
    # installed package first, then the git checkout, then a version.txt shipped with the build
    try:
        return _distribution_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    try:
        from setuptools_scm import get_version
        return get_version()
    except (ImportError, LookupError, OSError):
        pass

    try:
        with open("version.txt", "r") as f:
            return f.read().strip()
    except (FileNotFoundError, IOError):
        return "0.0.0"

__version__ = _resolve_version()
