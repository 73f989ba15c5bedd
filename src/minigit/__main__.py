"""Allow ``python -m minigit``."""

from .cli import main

if __name__ == "__main__":
    main()
