import sys

from antler.cli import main

sys.exit(main())
