# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the integration API with uvicorn.

Example:
    $ python -m integracao
"""

import uvicorn

from integracao.core.config import get_settings


def main() -> None:
    """Serve the app factory on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "integracao.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.debug else settings.api.workers,
        reload=settings.is_development and settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
