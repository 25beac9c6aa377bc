import sys

from carrier_contacts.cli import main

sys.exit(main())
