"""Allow running the updater with ``python -m cf_ddns``."""

from cf_ddns.cli import main

if __name__ == "__main__":
    main()
