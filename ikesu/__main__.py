import sys

from ikesu.cli import main

sys.exit(main())
