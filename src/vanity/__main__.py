"""Allow ``python -m vanity``."""

from vanity.cli import main

if __name__ == "__main__":
    main()
