"""Wire model of an encoded multimap.

Field order mirrors the transport layout: key comparator, value comparator,
number of distinct keys, then one slot per key holding the key, its value
count and its values in the multimap's own orders.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WIRE_FORMAT = "sortedmultimap/1"


class EncodedSlot(BaseModel):
    """One key and its values. A slot never carries zero values."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: Any
    value_count: int = Field(ge=1, strict=True)
    values: list[Any]

    @model_validator(mode="after")
    def check_values_match_count(self) -> EncodedSlot:
        if len(self.values) != self.value_count:
            raise ValueError(
                f"value_count is {self.value_count} but {len(self.values)} values follow"
            )
        return self


class EncodedMultimap(BaseModel):
    """A whole multimap as written to, or read from, the wire."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    format: str = WIRE_FORMAT
    key_comparator: str
    value_comparator: str
    key_count: int = Field(ge=0, strict=True)
    slots: list[EncodedSlot]
    payload_hash: str = ""  # SHA-256 of the canonical document without this field

    @field_validator("format")
    @classmethod
    def check_known_format(cls, value: str) -> str:
        if value != WIRE_FORMAT:
            raise ValueError(f"unsupported format {value!r}, expected {WIRE_FORMAT!r}")
        return value

    @model_validator(mode="after")
    def check_slots_match_count(self) -> EncodedMultimap:
        if len(self.slots) != self.key_count:
            raise ValueError(
                f"key_count is {self.key_count} but {len(self.slots)} slots follow"
            )
        return self

    @property
    def entry_count(self) -> int:
        """Total values across all slots, as written."""
        return sum(slot.value_count for slot in self.slots)
