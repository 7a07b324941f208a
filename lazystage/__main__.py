"""Module entrypoint for ``python -m lazystage``.

All argument parsing and runtime setup happen in ``lazystage.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
