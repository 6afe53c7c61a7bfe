import sys

from orddocs.cli import main

sys.exit(main())
