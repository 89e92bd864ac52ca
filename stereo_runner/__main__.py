"""Allow ``python -m stereo_runner <command>``."""

import sys

from stereo_runner.cli import main

sys.exit(main())
