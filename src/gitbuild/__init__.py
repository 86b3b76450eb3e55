"""
gitbuild: a package manager and build driver for C/C++ projects that vendors
dependencies as git repositories.
"""

__version__ = "0.1.0"
