#!/usr/bin/env python3
"""
Standalone entry point.

Usage:
    python3 jwt-inspect.py decode <token>
    python3 jwt-inspect.py analyze --stdin < token.txt

This shim delegates to the jwt_inspect package under src/.
"""

import sys
import os

# Ensure the src/ directory is on the Python path so the package can be found
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from jwt_inspect.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
