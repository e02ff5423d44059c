"""Allow running semrel with ``python -m semrel``."""

from semrel.cli import main

if __name__ == "__main__":
    main()
