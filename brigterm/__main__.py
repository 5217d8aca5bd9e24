import sys

from brigterm.cli import main

sys.exit(main())
