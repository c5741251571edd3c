import sys

from render_prompt.cli._dispatcher import main

sys.exit(main())
