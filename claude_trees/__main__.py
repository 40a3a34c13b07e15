"""Allow running claude-trees with `python -m claude_trees`."""

import sys

from claude_trees.cli.main import main

sys.exit(main())
