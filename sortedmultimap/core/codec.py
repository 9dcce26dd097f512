"""Encode and decode multimaps to the transport format.

Layout (see ``models.wire``): key comparator name, value comparator name,
number of keys, then for each key in key order the key, its value count
(always >= 1) and its values in value order. The document is written as
canonical JSON with a SHA-256 ``payload_hash`` so truncation and tampering
surface as ``CorruptDataError`` instead of a half-built multimap.

Only keys and values that JSON rebuilds exactly can be encoded: ``None``,
``bool``, ``int``, finite ``float``, ``str``, and lists or string-keyed
dicts of those. Anything else (tuples, sets, subclasses such as enums)
raises ``InvalidArgumentError`` at encode time, so ``decode(encode(m))``
always yields the same entries.

Decoding rebuilds the multimap through ``put``, so values that are
comparator-equal within a slot collapse silently.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sortedmultimap.config import settings
from sortedmultimap.core.comparators import ComparatorRegistry, default_registry
from sortedmultimap.core.multimap import SortedMultimap
from sortedmultimap.errors import CorruptDataError, InvalidArgumentError
from sortedmultimap.models.wire import EncodedMultimap, EncodedSlot

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (type(None), bool, int, str)


# ---------------------------------------------------------------------------
# Canonical form
# ---------------------------------------------------------------------------

def _canonical(document: dict[str, Any]) -> bytes:
    return json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def payload_hash(document: dict[str, Any]) -> str:
    """SHA-256 hex digest of *document* in canonical form, minus ``payload_hash``."""
    body = {name: field for name, field in document.items() if name != "payload_hash"}
    return hashlib.sha256(_canonical(body)).hexdigest()


def _check_encodable(obj: Any, where: str) -> None:
    """Reject anything JSON would not hand back as an equal object of the same type."""
    kind = type(obj)
    if kind in _SCALAR_TYPES:
        return
    if kind is float:
        if not math.isfinite(obj):
            raise InvalidArgumentError(
                f"{where} cannot be encoded: non-finite float {obj!r}"
            )
        return
    if kind is list:
        for item in obj:
            _check_encodable(item, where)
        return
    if kind is dict:
        for name, item in obj.items():
            if type(name) is not str:
                raise InvalidArgumentError(
                    f"{where} cannot be encoded: dict key {name!r} is not a str"
                )
            _check_encodable(item, where)
        return
    raise InvalidArgumentError(
        f"{where} cannot be encoded: {kind.__name__} {obj!r} does not survive "
        f"a JSON round trip"
    )


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def to_document(
    multimap: SortedMultimap, registry: ComparatorRegistry | None = None
) -> EncodedMultimap:
    """Build the wire document for *multimap*, payload hash included.

    Raises ``InvalidArgumentError`` if either comparator is not registered
    or a key or value would not decode back to an identical object.
    """
    registry = registry or default_registry
    key_name = registry.name_of(multimap.key_comparator)
    value_name = registry.name_of(multimap.value_comparator)

    slots = []
    for key, values in multimap.as_map().items():
        _check_encodable(key, f"Key {key!r}")
        for value in values:
            _check_encodable(value, f"Value under key {key!r}")
        slots.append(EncodedSlot(key=key, value_count=len(values), values=list(values)))

    document = EncodedMultimap(
        key_comparator=key_name,
        value_comparator=value_name,
        key_count=len(slots),
        slots=slots,
    )
    return document.model_copy(update={"payload_hash": payload_hash(document.model_dump())})


def from_document(
    document: EncodedMultimap, registry: ComparatorRegistry | None = None
) -> SortedMultimap:
    """Rebuild a multimap from a validated wire document.

    Any failure of the decoded comparators on the decoded data, whatever
    exception they raise, is reported as ``CorruptDataError``.
    """
    registry = registry or default_registry
    try:
        key_comparator = registry.resolve(document.key_comparator)
        value_comparator = registry.resolve(document.value_comparator)
    except InvalidArgumentError as exc:
        raise CorruptDataError(str(exc)) from exc

    multimap = SortedMultimap(key_comparator, value_comparator)
    for slot in document.slots:
        try:
            added = sum(multimap.put(slot.key, value) for value in slot.values)
        except Exception as exc:
            raise CorruptDataError(
                f"Slot {slot.key!r} cannot be ordered by the decoded comparators: "
                f"{type(exc).__name__}: {exc}"
            ) from exc
        if added < slot.value_count:
            logger.warning(
                "Slot %r: %d of %d values were duplicates and collapsed.",
                slot.key,
                slot.value_count - added,
                slot.value_count,
            )
    return multimap


# ---------------------------------------------------------------------------
# Bytes
# ---------------------------------------------------------------------------

def encode(
    multimap: SortedMultimap, registry: ComparatorRegistry | None = None
) -> bytes:
    """Encode *multimap* as canonical JSON bytes."""
    document = to_document(multimap, registry)
    data = _canonical(document.model_dump())
    logger.debug(
        "Encoded %d keys / %d entries (%d bytes).",
        document.key_count,
        document.entry_count,
        len(data),
    )
    return data


def parse_document(
    data: bytes | str, *, verify_hash: bool | None = None
) -> EncodedMultimap:
    """Parse and validate encoded bytes without building a multimap.

    Raises
    ------
    CorruptDataError
        If the bytes are not JSON, do not match the wire model, or fail the
        payload hash check.
    """
    if verify_hash is None:
        verify_hash = settings.verify_payload_hash

    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptDataError(f"Encoded multimap is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise CorruptDataError(
            f"Encoded multimap must be a JSON object, got {type(raw).__name__}"
        )

    try:
        document = EncodedMultimap.model_validate(raw)
    except ValidationError as exc:
        raise CorruptDataError(f"Malformed encoded multimap: {exc}") from exc

    if verify_hash:
        expected = payload_hash(raw)
        if document.payload_hash != expected:
            raise CorruptDataError(
                f"Payload hash mismatch: expected {expected!r}, "
                f"got {document.payload_hash!r}"
            )
    return document


def decode(
    data: bytes | str,
    registry: ComparatorRegistry | None = None,
    *,
    verify_hash: bool | None = None,
) -> SortedMultimap:
    """Decode bytes produced by ``encode`` back into a multimap."""
    document = parse_document(data, verify_hash=verify_hash)
    multimap = from_document(document, registry)
    logger.debug(
        "Decoded %d keys / %d entries.", len(multimap.key_set()), multimap.size()
    )
    return multimap


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def dump(
    multimap: SortedMultimap,
    path: Path,
    registry: ComparatorRegistry | None = None,
) -> Path:
    """Write the encoding of *multimap* to *path*; return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode(multimap, registry))
    logger.info("Wrote %d entries to %s.", multimap.size(), path)
    return path


def load(path: Path, registry: ComparatorRegistry | None = None) -> SortedMultimap:
    """Read and decode a multimap previously written by ``dump``."""
    return decode(Path(path).read_bytes(), registry)
