"""Allow ``python -m bibx``."""

import sys

from bibx.cli import main

sys.exit(main())
