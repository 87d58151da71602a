"""Allow running as ``python -m gh_info``."""

from gh_info.cli.main import main

main()
