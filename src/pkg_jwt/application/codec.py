from __future__ import annotations

import dataclasses
import json
import re
from typing import Any, Mapping, Type, TypeVar

from jwt.utils import base64url_decode, base64url_encode

from ..domain.exceptions import InvalidEncodingError, InvalidPayloadError

T = TypeVar("T")

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*")


def b64url_decode(segment: str) -> bytes:
    """
    Strict base64url (no padding) decode of a token segment.

    Rejects padding, foreign characters, impossible lengths and encodings
    whose unused trailing bits are not zero, so that every byte string has
    exactly one accepted spelling.
    """
    if not _BASE64URL.fullmatch(segment) or len(segment) % 4 == 1:
        raise InvalidEncodingError("Segment is not base64url without padding")

    data = base64url_decode(segment)
    if base64url_encode(data) != segment.encode("ascii"):
        raise InvalidEncodingError("Segment is not canonically base64url encoded")
    return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def json_decode(target: Type[T], data: bytes) -> T:
    """
    Decode a JSON object into `target`.

    `target` is either `dict` (the object is returned as-is) or a
    dataclass type, in which case unknown members are ignored and the
    remaining ones are passed to its constructor.
    """
    try:
        obj = json.loads(data, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise InvalidPayloadError(f"Invalid JSON: {exc}") from exc

    if not isinstance(obj, dict):
        raise InvalidPayloadError("Expected a JSON object")

    if target is dict or target is Mapping:
        return obj  # type: ignore[return-value]

    if not (isinstance(target, type) and dataclasses.is_dataclass(target)):
        raise TypeError(f"Cannot decode JSON into {target!r}; use dict or a dataclass")

    known = {f.name for f in dataclasses.fields(target) if f.init}
    try:
        return target(**{k: v for k, v in obj.items() if k in known})
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"Payload does not match {target.__name__}: {exc}") from exc
