import sys

from db_compare.cli import main

sys.exit(main())
