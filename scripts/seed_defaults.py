"""Amorce le magasin de contenu avec les documents par défaut.

Publie le contenu par défaut de chaque section qui n'a pas encore de version publiée
(`--force` écrase aussi les documents existants). Utilise la base configurée par
`DATABASE_URL` / `CONTENT_BACKEND`.
"""

from __future__ import annotations

import argparse
import sys

from portfolio_cms.core.container import container
from portfolio_cms.core.logging import setup_logging
from portfolio_cms.infra.seeding import seed_defaults


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed portfolio content with defaults")
    parser.add_argument("--force", action="store_true", help="overwrite published documents")
    parser.add_argument(
        "--language",
        action="append",
        choices=["zh", "en"],
        help="language to seed (repeatable, default: all)",
    )
    args = parser.parse_args(argv)

    setup_logging()
    written = seed_defaults(container.content_store, force=args.force, languages=args.language)
    for key in written:
        print(f"seeded {key}")
    print(f"seeded={len(written)} backend={container.content_store.backend_name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
