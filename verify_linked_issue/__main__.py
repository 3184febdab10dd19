import sys

from verify_linked_issue.main import main

sys.exit(main())
