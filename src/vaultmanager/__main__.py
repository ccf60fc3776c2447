import sys

from vaultmanager.main import main

sys.exit(main())
