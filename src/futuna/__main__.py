"""
Futuna CLI Entry Point

Enables running Futuna as a module:
    python -m futuna [command] [options]
"""

from futuna.cli.main import main

if __name__ == "__main__":
    main()
