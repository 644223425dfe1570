"""Allow ``python -m jasminer_exporter``."""

from jasminer_exporter.cli import main

if __name__ == "__main__":
    main()
