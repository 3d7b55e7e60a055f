import sys

from symdep.cli import main

sys.exit(main())
