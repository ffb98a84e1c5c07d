"""Loading OpenAPI / Swagger documents."""

from __future__ import annotations

import json
from typing import Any

import yaml

from docscope.log import get_logger


logger = get_logger(__name__)


def parse_spec_text(text: str) -> dict[str, Any]:
    """Parse a spec document, trying JSON first and YAML second.

    Raises:
        ValueError: If the text is neither, or does not hold a mapping
    """
    try:
        spec = json.loads(text)
    except json.JSONDecodeError:
        try:
            spec = yaml.safe_load(text)
        except yaml.YAMLError as e:
            msg = "Spec is neither valid JSON nor YAML"
            raise ValueError(msg) from e
    if not isinstance(spec, dict):
        msg = f"Spec must be a mapping, got {type(spec).__name__}"
        raise ValueError(msg)
    return spec


class SpecLoader:
    """Fetches and caches OpenAPI documents by URL."""

    def __init__(self, swaggerhub_api_key: str | None = None, *, cache: bool = True):
        """Initialize the loader.

        Args:
            swaggerhub_api_key: Bearer key sent to swaggerhub.com hosts
            cache: Keep fetched documents for the lifetime of the loader
        """
        self.swaggerhub_api_key = swaggerhub_api_key
        self.cache = cache
        self._specs: dict[str, dict[str, Any]] = {}

    def headers_for(self, url: str) -> dict[str, str]:
        headers = {"Accept": "application/json, application/yaml;q=0.9, */*;q=0.8"}
        if "swaggerhub.com" in url and self.swaggerhub_api_key:
            headers["Authorization"] = f"Bearer {self.swaggerhub_api_key}"
        return headers

    async def fetch_text(self, url: str) -> str:
        import anyenv

        response = await anyenv.get(url, headers=self.headers_for(url))
        return await response.text()

    async def load(self, url: str) -> dict[str, Any]:
        """Fetch and parse the OpenAPI document at ``url``."""
        if self.cache and url in self._specs:
            return self._specs[url]
        logger.debug("Fetching spec %s", url)
        spec = parse_spec_text(await self.fetch_text(url))
        if self.cache:
            self._specs[url] = spec
        return spec
