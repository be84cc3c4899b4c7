import sys

from .cli.lint_commands import main

sys.exit(main())
