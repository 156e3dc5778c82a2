"""
setup-slotalk CLI module.

This module provides the command-line interface for setup-slotalk.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
