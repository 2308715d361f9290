"""Allow ``python -m apicalypse``."""

from apicalypse.cli import main

if __name__ == "__main__":
    main()
