"""Public package surface for gptree.

Exports ``main`` for programmatic CLI invocation.
Library callers use ``gptree.commands`` or the ``tree_model``, ``config`` and
``output`` subpackages directly.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
