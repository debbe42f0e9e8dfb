"""
Convenience entry point for running tutorslots as a module.

Usage: python -m tutorslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
