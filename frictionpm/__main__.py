import sys

from frictionpm.cli import main

sys.exit(main())
