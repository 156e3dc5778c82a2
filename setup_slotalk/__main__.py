"""
Entry point for running setup-slotalk as a module.

Usage: python -m setup_slotalk [command] [options]
"""

from setup_slotalk.cli.parser import main

if __name__ == "__main__":
    main()
