import sys

from ember.repl import main

sys.exit(main())
