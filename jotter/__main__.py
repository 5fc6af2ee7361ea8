"""Entry point for the Jotter CLI.

This module serves as the main entry point when running the jotter package
directly with `python -m jotter`.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
