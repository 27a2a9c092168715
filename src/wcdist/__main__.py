import sys

from wcdist.client.cli import main

sys.exit(main())
