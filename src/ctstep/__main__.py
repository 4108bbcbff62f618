"""Allow running the step with ``python -m ctstep``."""

import sys

from ctstep.app import main

sys.exit(main())
