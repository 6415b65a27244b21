from __future__ import annotations

import logging

import uvicorn

from eventpulse.api.app import create_app
from eventpulse.config import get_settings
from eventpulse.logging_config import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = create_app()

    logging.getLogger(__name__).info("API starting")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=None)


if __name__ == "__main__":
    main()
