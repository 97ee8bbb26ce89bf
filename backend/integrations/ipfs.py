"""
Client for the content-addressed store (IPFS HTTP API).

Health documents are uploaded here first; the returned CID becomes the
record's content address. Every call carries a timeout and every failure
surfaces as :class:`errors.UpstreamUnavailable`.
"""
import logging

import requests

from errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class IpfsClient:

    def __init__(self, api_url, gateway_url="https://ipfs.io/ipfs", timeout=10,
                 project_id=None, project_secret=None):
        self.api_url = api_url.rstrip("/")
        self.gateway_base = gateway_url.rstrip("/") if gateway_url else None
        self.timeout = timeout
        # Infura-style basic auth, only when both halves are configured
        self.auth = (project_id, project_secret) if project_id and project_secret else None

    @classmethod
    def from_config(cls, config):
        return cls(
            api_url=config["IPFS_API_URL"],
            gateway_url=config.get("IPFS_GATEWAY_URL"),
            timeout=config.get("IPFS_TIMEOUT_SECONDS", 10),
            project_id=config.get("IPFS_PROJECT_ID"),
            project_secret=config.get("IPFS_PROJECT_SECRET"),
        )

    def _post(self, path, **kwargs):
        try:
            res = requests.post(
                f"{self.api_url}/api/v0/{path}",
                auth=self.auth,
                timeout=self.timeout,
                **kwargs,
            )
            res.raise_for_status()
        except requests.Timeout as e:
            logger.warning("[CONTENT] IPFS %s timed out after %ss", path, self.timeout)
            raise UpstreamUnavailable("Content store timed out") from e
        except requests.RequestException as e:
            logger.warning("[CONTENT] IPFS %s failed: %s", path, e)
            raise UpstreamUnavailable("Content store request failed") from e
        return res

    def put(self, data):
        """Upload *data* and return its content address (CID)."""
        res = self._post("add", files={"file": ("blob", data)}, params={"pin": "true"})
        try:
            cid = res.json()["Hash"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamUnavailable("Content store returned an unexpected reply") from e
        logger.info("[CONTENT] Stored %d bytes as %s", len(data), cid)
        return cid

    def get(self, content_address):
        res = self._post("cat", params={"arg": content_address})
        return res.content

    def gateway_url(self, content_address):
        if not content_address or not self.gateway_base:
            return None
        return f"{self.gateway_base}/{content_address}"
