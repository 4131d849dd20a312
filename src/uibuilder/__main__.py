"""Allow `python -m uibuilder` to launch the builder."""

import asyncio
import sys

from uibuilder.main import main

sys.exit(asyncio.run(main()))
