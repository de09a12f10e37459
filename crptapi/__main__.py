"""Main entry point when executing crptapi as a package.

This allows running the package using python -m crptapi.
"""

from crptapi.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
