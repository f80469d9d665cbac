"""RuleRecord — the fixed-field form of one rule as stored in the backing list.

A record carries the rule-type tag (``ptype``) and six positional slots
``v0`` .. ``v5``.  Slot *i* holds field *i* of the rule; unused slots are
the empty string.  Rules with more than six fields are truncated.

Decoding treats an empty slot as absent, so a rule with an intentional
empty-string field in the middle does not survive a round trip: the field
is dropped and later fields shift left.  This is a known limitation of the
record format.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from policy_list_store.exceptions import SerializationError

MAX_FIELDS = 6


class RuleRecord(BaseModel):
    """One stored rule.

    Attributes:
        ptype: Rule-type tag (e.g. ``"p"``, ``"g"``, ``"g2"``).
        v0-v5: Positional rule fields, ``""`` when unset.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    ptype: str
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    @property
    def fields(self) -> tuple[str, ...]:
        return (self.v0, self.v1, self.v2, self.v3, self.v4, self.v5)


def encode_rule(ptype: str, rule: Sequence[str]) -> RuleRecord:
    """Fill a record positionally from *rule*, dropping fields past ``v5``."""
    slots = {f"v{i}": value for i, value in enumerate(rule[:MAX_FIELDS])}
    try:
        return RuleRecord(ptype=ptype, **slots)
    except ValidationError as exc:
        raise SerializationError(repr([ptype, *rule]), "rule fields must be strings") from exc


def decode_record(record: RuleRecord) -> list[str]:
    """Return ``[ptype, *fields]`` keeping only the non-empty slots."""
    return [record.ptype, *(value for value in record.fields if value != "")]


def dumps_rule(ptype: str, rule: Sequence[str]) -> str:
    """Encode a rule straight to its stored JSON text.

    The output is compact with a fixed key order, so equal rules always
    produce equal strings.
    """
    return encode_rule(ptype, rule).model_dump_json()


def loads_record(text: str | bytes) -> RuleRecord:
    """Parse one stored element.  Raises :class:`SerializationError`.

    Bytes must be valid UTF-8.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError(text.decode("utf-8", errors="replace"), str(exc)) from exc
    try:
        return RuleRecord.model_validate_json(text)
    except ValidationError as exc:
        raise SerializationError(text, f"{exc.error_count()} validation error(s)") from exc
