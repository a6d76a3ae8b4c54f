import sys

from clusterboot.cli import main

sys.exit(main())
