import sys

from payment_engine.cli import main

sys.exit(main())
