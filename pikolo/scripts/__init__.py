"""Initialization for the scripts package.

This module exports utilities from the scripts submodules for easy import.
"""

from .export_quotes import *
