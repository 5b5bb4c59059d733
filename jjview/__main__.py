"""Module entrypoint for ``python -m jjview``.

Argument parsing and runtime setup happen in ``jjview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
