"""Module entrypoint for ``python -m qfnav``.

All argument parsing happens in ``qfnav.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
