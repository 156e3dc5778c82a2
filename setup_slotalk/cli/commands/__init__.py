"""
Command implementations for the setup-slotalk CLI.

Each module exposes ``run(args) -> int``.
"""
