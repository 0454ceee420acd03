# backend/depotview/services/transactions/source.py
"""
Transaction sources: where a client's statement lines come from.

The statement backend exposes one endpoint per client:

    GET {base_url}/transactions/{client_id}

    [
      {"clientId": "C1", "transactionId": "T1", "date": "2024-01-15",
       "asset": "Apple Inc.", "isin": "US0378331005", "ticker": "AAPL",
       "type": "Stock", "quantity": 10, "unitPrice": 150.0,
       "totalValue": 1500.0},
      ...
    ]

Records are parsed leniently (see TransactionRecordIn): missing or
malformed numbers count as zero so one bad line cannot hide a portfolio.
A record that is not an object at all is skipped with a warning.
"""

import logging
from abc import ABC, abstractmethod
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from depotview.schemas.transactions import TransactionRecordIn
from depotview.services.exceptions import (
    ClientNotFoundError,
    TransactionSourceError,
)
from depotview.services.portfolio.types import TransactionRecord

logger = logging.getLogger(__name__)


class TransactionSource(ABC):
    """Abstract source of transaction records for one client."""

    @abstractmethod
    def get_transactions(self, client_id: str) -> list[TransactionRecord]:
        """
        Load all transaction records of a client.

        Raises:
            ClientNotFoundError: Unknown client
            TransactionSourceError: Source unreachable or answered garbage
        """
        pass


def parse_transactions(payload: object, client_id: str) -> list[TransactionRecord]:
    """
    Convert a decoded JSON payload into TransactionRecords.

    Accepts a bare list or an object with a "transactions" list.

    Raises:
        TransactionSourceError: If the payload is not a list of records
    """
    if isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
        payload = payload["transactions"]

    if not isinstance(payload, list):
        raise TransactionSourceError(client_id, f"expected a list, got {type(payload).__name__}")

    records: list[TransactionRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning(f"Skipping transaction #{index} for client {client_id}: not an object")
            continue
        try:
            records.append(TransactionRecordIn.model_validate(item).to_record())
        except PydanticValidationError as e:
            logger.warning(f"Skipping transaction #{index} for client {client_id}: {e}")

    return records


def _path_segment(value: str) -> str:
    """Percent-encode value as exactly one URL path segment."""
    segment = quote(value, safe="")
    # "." and ".." would be collapsed as dot segments
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


class HttpTransactionSource(TransactionSource):
    """
    Loads transactions from the statement backend over HTTP.

    Configuration:
        base_url: API root, e.g. "http://localhost:8080/api"
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Example:
        source = HttpTransactionSource("http://localhost:8080/api")
        records = source.get_transactions("C1")
    """

    def __init__(
            self,
            base_url: str,
            timeout: float = 10.0,
            transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info(f"HttpTransactionSource initialized (base_url={self._base_url}, timeout={timeout}s)")

    def get_transactions(self, client_id: str) -> list[TransactionRecord]:
        client_id = client_id.strip()
        logger.debug(f"Fetching transactions for client {client_id}")

        try:
            response = self._client.get(f"/transactions/{_path_segment(client_id)}")
        except httpx.TimeoutException as e:
            raise TransactionSourceError(client_id, f"timeout: {e}")
        except httpx.HTTPError as e:
            raise TransactionSourceError(client_id, str(e))

        if response.status_code == 404:
            raise ClientNotFoundError(client_id)

        if response.is_error:
            raise TransactionSourceError(
                client_id, f"statement backend answered HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TransactionSourceError(client_id, f"invalid JSON: {e}")

        records = parse_transactions(payload, client_id)
        logger.info(f"Loaded {len(records)} transactions for client {client_id}")
        return records

    def close(self) -> None:
        self._client.close()
