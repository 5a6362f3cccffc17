"""Entry point for 'python -m postcollections' command."""

from postcollections.cli import main

if __name__ == "__main__":
    main()
