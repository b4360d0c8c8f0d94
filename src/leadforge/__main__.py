"""Allow ``python -m leadforge``."""

import sys

from .main import main

sys.exit(main())
