"""Allow running as `python -m jobparser`."""

from .cli import main

main()
