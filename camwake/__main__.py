"""
Entry point for running camwake as a module.

This allows running the package with: python -m camwake
"""

from .cli import main

if __name__ == '__main__':
    main()
