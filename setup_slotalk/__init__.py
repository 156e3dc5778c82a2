"""
setup-slotalk: install the slotalk release binary in CI pipelines.
"""

__version__ = "0.1.0"
