"""Allow running as ``python -m freelivtv``."""

from freelivtv.main import main

main()
