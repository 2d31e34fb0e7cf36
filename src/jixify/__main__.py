"""Entry point for 'python -m jixify' command."""

from jixify.cli import main

if __name__ == "__main__":
    main()
