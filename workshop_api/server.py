"""
Run the workshop API with uvicorn on the configured port.
"""

from __future__ import annotations

import logging

import uvicorn

from workshop_api.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Server starting on port %s", settings.port)
    uvicorn.run("workshop_api.app:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
