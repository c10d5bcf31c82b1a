"""Entry point for running the generator via ``python main.py``."""

import sys

from nodegql.cli import main

if __name__ == "__main__":
    sys.exit(main())
