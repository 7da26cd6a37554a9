import sys

from futarchy_twap.main import main

sys.exit(main())
