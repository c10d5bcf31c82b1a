"""Entry point for ``python -m nodegql``."""

import sys

from nodegql.cli import main

if __name__ == "__main__":
    sys.exit(main())
