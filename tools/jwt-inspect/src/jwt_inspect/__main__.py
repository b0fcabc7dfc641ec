"""
Top-level entry point: python -m jwt_inspect <subcommand>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
