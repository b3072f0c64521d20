"""
Main entry point for running naj as a module.

Usage:
    python -m naj <profile-id> [git args...]
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
