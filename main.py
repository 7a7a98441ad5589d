"""
Batch user submitter (entrypoint).

Reads data.json and POSTs every user to the users API, one request per record,
printing each raw response body on stdout. Log output goes to stderr.

Run with: python main.py
Start a local target first with: python -m microservices.users_service_app
"""
import logging
import sys

import httpx
from pydantic import ValidationError

from config.settings import settings
from core.logging import configure_logging
from services.user_submitter import run

logger = logging.getLogger("submitter")


def main() -> int:
    configure_logging(settings.LOG_LEVEL)

    # one client for the whole run; timeout=None blocks until the server answers,
    # redirects are followed and only the final body is printed
    with httpx.Client(timeout=settings.REQUEST_TIMEOUT, follow_redirects=True) as client:
        try:
            run(client, settings.DATA_FILE, settings.USERS_API_URL)
        except OSError as e:
            logger.critical("Error occurred while reading file %s: %s", settings.DATA_FILE, e)
            return 1
        except ValidationError as e:
            logger.critical("Error occurred while parsing %s: %s", settings.DATA_FILE, e)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
