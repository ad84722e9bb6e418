import sys

from cpu_scheduler.cli import main

sys.exit(main())
