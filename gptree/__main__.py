"""Module entrypoint for ``python -m gptree``.

All argument parsing and dispatch happen in ``gptree.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
