"""Allow `python -m dayflow`."""

import sys

from dayflow.cli import main

if __name__ == "__main__":
    sys.exit(main())
