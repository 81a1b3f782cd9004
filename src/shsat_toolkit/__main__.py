import sys

from shsat_toolkit.cli import main

sys.exit(main())
