import sys

from shorts_workflow.cli import main

sys.exit(main())
