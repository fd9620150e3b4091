import sys

from badge_forge.cli import main

sys.exit(main())
