import sys

from vim_runner.cli import main

sys.exit(main())
