"""Main entry point for running longboard as a module.

Usage:
    python -m longboard get https://example.com
    python -m longboard --help
"""

from longboard.cli import run

if __name__ == '__main__':
    run()
