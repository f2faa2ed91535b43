"""Allow `python -m char_grid`."""

from char_grid.cli.main import main

main()
