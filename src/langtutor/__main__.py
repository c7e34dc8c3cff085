"""Allow `python -m langtutor`."""

from .cli import main

main()
