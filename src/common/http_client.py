"""Shared HTTP helpers used by the registry client.

Encapsulates request/timeout error handling so callers deal with a single
exception type. Transport failures surface as ``RegistryError``; there is no
retry or caching layer.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from errors import RegistryError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "nuget").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object.

    Raises:
        RegistryError: On timeout or any other transport error.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise RegistryError(f"{context} request timed out: {safe_target}") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise RegistryError(f"{context} connection error: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == 200 else "http_error",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def get_json(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Optional[Any]]:
    """Perform a GET request and decode a JSON body.

    Args:
        url: Target URL
        context: Human-readable source tag for logs
        headers: Optional request headers (defaults to Accept: application/json)
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, parsed_json_or_none). The body is only decoded
        for a 200 response.

    Raises:
        RegistryError: On transport errors or a 200 response that is not JSON.
    """
    res = safe_get(url, context=context, headers=headers or HEADERS_JSON, **kwargs)
    if res.status_code != 200:
        return res.status_code, None
    try:
        return res.status_code, json.loads(res.text)
    except json.JSONDecodeError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    target=safe_url(url)
                )
            )
        raise RegistryError(f"{context} returned invalid JSON from {safe_url(url)}") from exc
