import sys

from signdispatch.presentation.cli import main

sys.exit(main())
