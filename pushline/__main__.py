"""Allow running Pushline with ``python -m pushline``."""

from pushline.cli.app import main

if __name__ == "__main__":
    main()
