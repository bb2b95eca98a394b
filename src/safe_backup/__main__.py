import sys

from safe_backup.main import main

sys.exit(main())
