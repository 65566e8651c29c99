"""Allows running the reader with ``python -m fdr``."""
import sys

from fdr.main import main

if __name__ == "__main__":
    sys.exit(main())
