"""Lifelog Digest CLI実行用エントリポイント

Usage:
    python -m src.lifelog_digest <command> [options]
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
