"""Allow running workbox with `python -m workbox`."""

import sys

from workbox.cli.main import main

sys.exit(main())
