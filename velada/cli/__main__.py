import sys

from velada.cli import main

sys.exit(main())
