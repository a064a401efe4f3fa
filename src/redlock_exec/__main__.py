"""Allow ``python -m redlock_exec``."""

from redlock_exec.cli.main import main

if __name__ == "__main__":
    main()
