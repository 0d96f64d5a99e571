"""Main entry point for the circdesk package."""

from circdesk.cli import main

if __name__ == "__main__":
    main()
