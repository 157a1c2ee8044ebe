import sys

from snapmatch.golden.cli import main

sys.exit(main())
