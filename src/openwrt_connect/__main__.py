from __future__ import annotations

import sys

from .cli import main

# Error handling lives in cli.main() so `python -m openwrt_connect` and the
# installed script behave the same.
if __name__ == "__main__":
    sys.exit(main())
