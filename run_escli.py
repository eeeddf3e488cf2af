"""Convenience shim to run escli from a source checkout."""

from __future__ import annotations

from escli.runner import run


if __name__ == "__main__":
    run()
