"""Entry point for the 'python -m keychain' command."""

from keychain.cli import main

if __name__ == "__main__":
    main()
