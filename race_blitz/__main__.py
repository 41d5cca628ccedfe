"""Allow ``python -m race_blitz``."""

from race_blitz.cli import main

main()
