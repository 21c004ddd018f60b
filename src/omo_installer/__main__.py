"""Allow ``python -m omo_installer``."""

import sys

from omo_installer.cli import main

if __name__ == "__main__":
    sys.exit(main())
