"""
Content graph store client: publishes modules (pages) with their body HTML and chart JS.

Responsibility: Wire format and HTTP calls only. The bot decides what goes into a
module; this client just writes it. Errors are raised as httpx.HTTPError.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx

from opendatabot.core.config import GRAPH_STORE_TIMEOUT, GRAPH_STORE_TOKEN, GRAPH_STORE_URL
from opendatabot.services.text_processing import slugify

logger = logging.getLogger(__name__)

_BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def _base62(n: int) -> str:
    if n == 0:
        return _BASE62[0]
    out = []
    while n:
        n, rem = divmod(n, 62)
        out.append(_BASE62[rem])
    return "".join(reversed(out))


@dataclass
class Module:
    """A published page in the content graph."""

    id: str
    name: str
    headline: str = ""
    categories: list[str] = field(default_factory=list)
    creators: list[str] = field(default_factory=list)
    camera: dict[str, Any] = field(default_factory=dict)
    feature_image: str = ""
    description: str = ""
    pub_date: str = ""
    code_credit: str = ""

    def __post_init__(self) -> None:
        self.id = (self.id or "").strip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "headline": self.headline,
            "categories": list(self.categories),
            "creators": list(self.creators),
            "camera": self.camera,
            "featureImage": self.feature_image,
            "description": self.description,
            "pubDate": self.pub_date,
            "codeCredit": self.code_credit,
        }

    def vertex_query(self) -> str:
        """Store path addressing this module's vertex."""
        if not self.id:
            raise ValueError("module has no id")
        return f"modules/{self.id}"

    def slug_id(self) -> str:
        """Short URL id: the module's UUID as base62."""
        return _base62(uuid.UUID(self.id).int)

    def slug_title(self) -> str:
        return slugify(self.name)


class GraphStoreClient:
    """HTTP client for the content graph store. Each write is one PUT."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = GRAPH_STORE_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self, content_type: str) -> dict[str, str]:
        headers = {"Content-Type": content_type}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _put(self, path: str, content: bytes, content_type: str) -> None:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.info("[graph_store:put] url=%s bytes=%d", url, len(content))
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.put(url, content=content, headers=self._headers(content_type))
        response.raise_for_status()

    def write_module(self, module: Module) -> None:
        """Create or replace the module vertex."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.put(
                f"{self.base_url}/{module.vertex_query()}",
                json=module.to_dict(),
                headers=self._headers("application/json"),
            )
        response.raise_for_status()
        logger.info("[graph_store:write_module] id=%s name=%r", module.id, module.name)

    def write_body_text(self, query: str, body: str) -> None:
        self._put(f"{query}/body", body.encode("utf-8"), "text/html; charset=utf-8")

    def write_js(self, query: str, js: str) -> None:
        self._put(f"{query}/js", js.encode("utf-8"), "application/javascript; charset=utf-8")


def get_graph_store() -> GraphStoreClient | None:
    """Client from GRAPH_STORE_URL, or None when publishing is not configured."""
    if not GRAPH_STORE_URL:
        logger.info("[graph_store] GRAPH_STORE_URL not set; publishing disabled")
        return None
    return GraphStoreClient(GRAPH_STORE_URL, token=GRAPH_STORE_TOKEN)
