"""
Serveur de développement local.

Par défaut le contenu est gardé en mémoire et amorcé avec les valeurs par défaut; définir
`CONTENT_BACKEND=sql` et `DATABASE_URL` pour une base persistante.
"""

import os

# valeurs locales AVANT l'import de l'application
os.environ.setdefault("CONTENT_BACKEND", "memory")
os.environ.setdefault("SEED_DEFAULTS", "true")

import uvicorn  # noqa: E402

from portfolio_cms.app.main import app  # noqa: E402
from portfolio_cms.core.container import container  # noqa: E402


def main():
    settings = container.settings
    port = int(os.environ.get("PORT", settings.APP_PORT))
    uvicorn.run(app, host=settings.APP_HOST, port=port, reload=False)


if __name__ == "__main__":
    main()
