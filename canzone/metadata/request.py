"""Helpers for metadata requests over the message channel."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from canzone.metadata.errors import EmptyResponse

log = logging.getLogger(__name__)


def metrics_uri(uri: str, country: str, product: Optional[str] = None) -> str:
    """Append the country and, if known, the product to a request URI."""
    separator = "&" if "?" in uri else "?"
    result = f"{uri}{separator}country={country}"
    if product is not None:
        result += f"&product={product}"
    log.debug("Requesting %s", result)
    return result


def first_payload(payload: Iterable[bytes]) -> bytes:
    """Return the first part of a response payload; raise if there is none."""
    for part in payload:
        data = bytes(part)
        log.debug("Received metadata: %r", data)
        return data
    raise EmptyResponse()