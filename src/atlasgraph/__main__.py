"""Allow running atlasgraph as a module: python -m atlasgraph."""

import sys

from atlasgraph.cli import main

sys.exit(main())
