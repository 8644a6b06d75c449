"""Allow ``python -m gridrunner``."""

from gridrunner.cli.main import main

if __name__ == "__main__":
    main()
