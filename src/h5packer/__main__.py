"""Package entry point.

    python -m h5packer pack <sourceDir> <destinationFile>
"""

from __future__ import annotations

import sys

from h5packer.cli import main

if __name__ == "__main__":
    sys.exit(main())
