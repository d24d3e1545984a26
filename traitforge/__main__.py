"""Allow running as: python -m traitforge"""

import sys

from .cli import main

sys.exit(main())
