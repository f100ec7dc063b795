import sys

from teraverse.cli import main

sys.exit(main())
