"""
Batch user submitter.

Reads user records from a JSON file and POSTs each one to the users API,
printing the raw response body per record.

Failure handling:
- unreadable file / malformed JSON: raised to the caller (fatal for the run)
- serialization or request build failure: logged, record skipped
- transport failure on send or read: logged, remaining records abandoned
"""
import logging
from pathlib import Path
from typing import Iterable

import httpx
from pydantic_core import PydanticSerializationError

from models.schemas import SubmissionReport
from models.user import User, parse_users, serialize_user

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def load_users(path: str | Path) -> list[User]:
    """
    Read and parse the whole input file.

    Raises:
        OSError: file missing, unreadable, etc.
        pydantic.ValidationError: content is not a JSON array of users.
    """
    data = Path(path).read_bytes()
    users = parse_users(data)
    logger.info("[submitter] Loaded %d user records from %s", len(users), path)
    return users


def submit_users(client: httpx.Client, users: Iterable[User], url: str) -> SubmissionReport:
    """
    Send one create-request per user, in input order.

    The response status is not inspected; any body the server returns is
    printed. A transport error stops the loop for all remaining users.
    """
    users = list(users)
    report = SubmissionReport(total=len(users))
    for index, user in enumerate(users):
        try:
            payload = serialize_user(user)
        except PydanticSerializationError as e:
            logger.error("[submitter] Error serializing user #%d: %s", index, e)
            report.skipped += 1
            continue

        try:
            request = client.build_request("POST", url, content=payload, headers=REQUEST_HEADERS)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("[submitter] Error building request for user #%d: %s", index, e)
            report.skipped += 1
            continue

        try:
            response = client.send(request, stream=True)
        except httpx.RequestError as e:
            logger.error("[submitter] Request for user #%d failed, stopping: %s", index, e)
            report.aborted = True
            report.error = str(e)
            break

        try:
            response.read()
        except httpx.RequestError as e:
            logger.error("[submitter] Reading response for user #%d failed, stopping: %s", index, e)
            report.aborted = True
            report.error = str(e)
            break
        finally:
            response.close()

        logger.debug("[submitter] User #%d -> HTTP %s", index, response.status_code)
        print(response.text)
        report.sent += 1

    logger.info(
        "[submitter] Done: sent=%d skipped=%d aborted=%s",
        report.sent, report.skipped, report.aborted,
    )
    return report


def run(client: httpx.Client, data_file: str | Path, url: str) -> SubmissionReport:
    """Load the input file and submit every record. Load errors propagate."""
    users = load_users(data_file)
    return submit_users(client, users, url)
