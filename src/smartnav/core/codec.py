"""Deep-link codec and transport value decoder (source of truth).

Deep links
----------
``DeepLinkCodec(scheme="smartnav")``

- ``encode(path, params)`` -> ``"<scheme>://<path>"`` followed by
  ``"?<query>"`` only when ``params`` is non-empty. Keys are sorted and every
  value goes through :func:`encode_value`, so equal inputs always produce
  byte-identical output regardless of dict ordering.
- ``decode(uri)`` -> :class:`DeepLink`. Non-string input, a missing ``://``
  separator or a foreign scheme decode to ``DeepLink("", {})``; the codec
  never raises on input it did not produce.
- ``encode_query(path, params)`` / ``decode_query(query)`` handle the window
  startup form where the path travels as the ``path`` query key.

Transport values
----------------
Transfer media (query strings, handoff slots) only carry strings.
:func:`encode_value` writes one :data:`NavigationValue` as a string and
:func:`parse_value` sniffs it back:

==================  ===========================  =========================
value               encoded                      sniffed back
==================  ===========================  =========================
``True``/``False``  ``true``/``false``           bool
``None``            ``null``                     ``None`` (also ``undefined``)
``int``             ``str(value)``               int
``float``           ``repr(value)``              float
``dict``/``list``   compact JSON, sorted keys    JSON object / array
``str``             itself                       str
==================  ===========================  =========================

A string that would be sniffed as something else (``"42"``, ``"true"``,
``"{...}"``) is written as a JSON string literal instead. Non-finite floats
and values outside the variant set raise ``ValueError``/``TypeError``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple, Union
from urllib.parse import parse_qsl, quote, unquote, urlencode

from .base import NavigationParams, NavigationValue

__all__ = ["DeepLink", "DeepLinkCodec", "encode_value", "parse_value"]

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?$")
_JSON_BOUNDS = {"{": "}", "[": "]", '"': '"'}
_PATH_SAFE = "/:@-._~!$&'()*+,;="


def parse_value(raw: Any) -> NavigationValue:
    """Decode a transport string into the most specific variant it spells."""
    if not isinstance(raw, str):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw in ("null", "undefined"):
        return None
    if _INT_RE.match(raw):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    closing = _JSON_BOUNDS.get(raw[:1])
    if closing is not None and len(raw) > 1 and raw.endswith(closing):
        try:
            return json.loads(raw)
        except (ValueError, RecursionError):
            return raw
    return raw


def encode_value(value: Any) -> str:
    """Encode a single navigation value as a transport string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite float cannot be transported: {value!r}")
        return repr(value)
    if isinstance(value, str):
        sniffed = parse_value(value)
        if isinstance(sniffed, str) and sniffed == value:
            return value
        return json.dumps(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False)
    raise TypeError(f"Unsupported navigation value type: {type(value).__name__}")


@dataclass(frozen=True)
class DeepLink:
    """Decoded ``(path, params)`` pair."""

    path: str = ""
    params: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self):
        yield self.path
        yield self.params

    def __bool__(self) -> bool:
        return bool(self.path)


class DeepLinkCodec:
    """Canonical ``scheme://path?query`` encoder/decoder."""

    __slots__ = ("scheme",)

    def __init__(self, scheme: str = "smartnav") -> None:
        if not scheme or "://" in scheme:
            raise ValueError(f"Invalid deep-link scheme: {scheme!r}")
        self.scheme = scheme

    def encode(self, path: str, params: Mapping[str, NavigationValue] = None) -> str:
        link = f"{self.scheme}://{quote(path, safe=_PATH_SAFE)}"
        query = self._encode_params(params or {})
        return f"{link}?{query}" if query else link

    def decode(self, uri: Any) -> DeepLink:
        if not isinstance(uri, str):
            logger.debug("Cannot decode non-string deep link %r", uri)
            return DeepLink()
        scheme, sep, rest = uri.partition("://")
        if not sep or scheme != self.scheme:
            logger.debug("Ignoring deep link with foreign or missing scheme: %r", uri)
            return DeepLink()
        raw_path, _, query = rest.partition("?")
        return DeepLink(unquote(raw_path), self._decode_params(query))

    def encode_query(self, path: str, params: Mapping[str, NavigationValue] = None) -> str:
        items = {"path": path, **dict(params or {})}
        return self._encode_params(items)

    def decode_query(self, query: Union[str, Mapping[str, Any], None]) -> DeepLink:
        """Decode window startup parameters; ``path`` becomes the link path."""
        if query is None:
            return DeepLink()
        if isinstance(query, str):
            params = self._decode_params(query.lstrip("?"))
        elif isinstance(query, Mapping):
            params = {str(key): parse_value(value) for key, value in query.items()}
        else:
            logger.debug("Cannot decode startup parameters of type %s", type(query).__name__)
            return DeepLink()
        path = params.pop("path", "")
        if not isinstance(path, str):
            path = "" if path is None else str(path)
        return DeepLink(path, params)

    def _encode_params(self, params: Mapping[str, NavigationValue]) -> str:
        items = [(str(key), encode_value(value)) for key, value in sorted(params.items())]
        return urlencode(items, quote_via=quote)

    @staticmethod
    def _decode_params(query: str) -> NavigationParams:
        pairs: Tuple[Tuple[str, str], ...] = tuple(parse_qsl(query, keep_blank_values=True))
        return {key: parse_value(value) for key, value in pairs}
