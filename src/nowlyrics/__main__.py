"""Allow running nowlyrics as ``python -m nowlyrics``."""

from nowlyrics.cli import main

main()
