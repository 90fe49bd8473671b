# price_tracker/__main__.py

"""Allow ``python -m price_tracker``."""

from price_tracker.cli.main import main

main()
