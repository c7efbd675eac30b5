import sys

from srms.cli import main

sys.exit(main())
