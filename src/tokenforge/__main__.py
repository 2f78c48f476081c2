"""Allow ``python -m tokenforge``."""

from tokenforge.cli import main

if __name__ == "__main__":
    main()
