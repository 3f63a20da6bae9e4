"""Allow ``python -m bearertoken``."""

from bearertoken.app import main

if __name__ == "__main__":
    main()
