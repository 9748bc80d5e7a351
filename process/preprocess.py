# ============================================================================
# TRAIT PRE-PROCESSING
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Process - `processing` stage of trait templates
# PURPOSE: Fetch external data before the trait outputs are wrapped
# CREATED: 19 OCT 2026
# ============================================================================
"""
Trait Pre-Processing

A trait template may declare a `processing` field. Before outputs are
collected, the evaluated instance is handed to a PreProcessor, which
returns a new instance.

HttpPreProcessor performs the HTTP call declared in `processing.http`
and fills the decoded JSON response into `processing.output`:

    processing:
      output: {}
      http:
        method: GET
        url: "http://ip-service/ip"
        request:
          header: {Accept: application/json}
          timeout: 5
    output:
      apiVersion: v1
      kind: ConfigMap
      data:
        ip: "{{ processing.output.myIP }}"
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from core.config import PreProcessDefaults, get_defaults
from core.contracts import PROCESSING_FIELD_NAME
from core.errors import DefinitionError, PreProcessError
from core.logging import get_logger, ComponentType
from engine.instance import Instance

logger = get_logger(__name__, ComponentType.PREPROCESS)


class PreProcessor(ABC):
    """Transforms an evaluated trait instance."""

    @abstractmethod
    def transform(self, instance: Instance) -> Instance:
        """
        Run the processing stage.

        Raises:
            PreProcessError: If the stage fails
        """
        pass


class HttpPreProcessor(PreProcessor):
    """Fills `processing.output` from an HTTP call."""

    def __init__(self, config: Optional[PreProcessDefaults] = None):
        self._config = config or get_defaults().preprocess

    def transform(self, instance: Instance) -> Instance:
        http_value = instance.lookup(f"{PROCESSING_FIELD_NAME}.http")
        if not http_value.exists():
            return instance

        try:
            declaration = http_value.as_object()
        except DefinitionError as e:
            raise PreProcessError("processing.http is not concrete") from e
        if not isinstance(declaration, dict) or not declaration.get("url"):
            raise PreProcessError("processing.http.url is required")

        body = self._call(declaration)
        try:
            return instance.fill(f"{PROCESSING_FIELD_NAME}.output", body)
        except DefinitionError as e:
            raise PreProcessError("fill processing.output") from e

    def _call(self, declaration: Dict[str, Any]) -> Any:
        """Perform the declared request and decode the JSON body."""
        method = str(declaration.get("method") or self._config.default_method).upper()
        url = str(declaration["url"])
        request = declaration.get("request") or {}
        headers = {str(k): str(v) for k, v in (request.get("header") or {}).items()}
        timeout = float(request.get("timeout") or self._config.http_timeout_seconds)
        content = request.get("body")
        if isinstance(content, (dict, list)):
            content = json.dumps(content)

        try:
            with httpx.Client(timeout=timeout) as client:
                resp = client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as e:
            logger.error(f"Processing request {method} {url} failed: {e}")
            raise PreProcessError(f"{method} {url} failed") from e

        if resp.status_code >= 400:
            raise PreProcessError(
                f"{method} {url} returned status {resp.status_code}",
                details={"body": resp.text[:512]},
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise PreProcessError(f"{method} {url} returned a non-JSON body") from e

        logger.debug(f"Processing request {method} {url} -> {resp.status_code}")
        return body


__all__ = ["PreProcessor", "HttpPreProcessor"]
