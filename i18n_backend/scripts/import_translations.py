"""Import translation bundles into the database.

Usage:
    python -m i18n_backend.scripts.import_translations locales/en.yml locales/fr.yml
    python -m i18n_backend.scripts.import_translations --create-tables locales/*.yml
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from i18n_backend.app.core.database import Base, SessionLocal, engine
from i18n_backend.app.services.cache_store import lookup_store
from i18n_backend.app.services.importer import load_from_yml

# Import all models so metadata knows every table
import i18n_backend.app.models.locale  # noqa: F401


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("files", nargs="+", help="YAML or JSON bundle files")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before importing (development databases)",
    )
    parser.add_argument(
        "--no-mark-untranslated",
        dest="mark_untranslated",
        action="store_false",
        help="Do not add NULL rows for keys missing from non-default locales",
    )
    parser.add_argument(
        "--keep-cache",
        action="store_true",
        help="Do not drop cache entries of imported keys",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    cache_store = None if args.keep_cache else lookup_store()
    db = SessionLocal()
    try:
        for path in args.files:
            try:
                summary = load_from_yml(
                    db,
                    path,
                    cache_store=cache_store,
                    mark_untranslated=args.mark_untranslated,
                )
            except (OSError, ValueError) as e:
                print(f"Error: {path}: {e}", file=sys.stderr)
                return 1
            for code, count in sorted(summary.items()):
                print(f"  {path}: {code:<8} {count} translations")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
