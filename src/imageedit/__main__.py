import sys

from imageedit.cli import main

sys.exit(main())
