"""
Client for the optional settlement service (a transaction submitter).

Its transaction reference is stored verbatim on the record. Settlement is best
effort: callers use :func:`settle_record`, which never blocks record creation.
"""
import logging

import requests

from errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class SettlementClient:

    def __init__(self, url, timeout=5, api_token=None):
        self.url = url
        self.timeout = timeout
        self.api_token = api_token

    @classmethod
    def from_config(cls, config):
        if not config.get("SETTLEMENT_URL"):
            return None
        return cls(
            url=config["SETTLEMENT_URL"],
            timeout=config.get("SETTLEMENT_TIMEOUT_SECONDS", 5),
            api_token=config.get("SETTLEMENT_API_TOKEN"),
        )

    def submit(self, record):
        """Submit *record*'s content address and return the transaction reference."""
        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}
        try:
            res = requests.post(
                self.url,
                json={
                    "record_id": record.id,
                    "owner_id": record.owner_id,
                    "content_address": record.content_address,
                },
                headers=headers,
                timeout=self.timeout,
            )
            res.raise_for_status()
            tx_ref = res.json()["tx_hash"]
        except requests.RequestException as e:
            raise UpstreamUnavailable("Settlement service request failed") from e
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamUnavailable("Settlement service returned an unexpected reply") from e
        return str(tx_ref)


def settle_record(client, store, record):
    """Attach a settlement reference to *record* if a client is configured.

    Returns the (possibly updated) record. Failures are logged and skipped.
    """
    if client is None:
        return record
    try:
        tx_ref = client.submit(record)
    except UpstreamUnavailable as e:
        logger.warning("[SETTLEMENT] Record %s not settled: %s", record.id, e.message)
        return record
    logger.info("[SETTLEMENT] Record %s settled as %s", record.id, tx_ref)
    return store.attach_transaction(record.id, tx_ref)
