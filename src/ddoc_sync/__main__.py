import sys

from ddoc_sync.cli import main

sys.exit(main())
