"""PolicyModel — the in-memory rule set the adapter loads into and saves from."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

SECTIONS = ("p", "g")


class PolicyModel:
    """Rules grouped by section (``"p"``, ``"g"``) and then by rule-type tag.

    Insertion order of rules within one ``(section, ptype)`` is preserved.
    Duplicates are kept; removal drops the first match only.
    """

    def __init__(self) -> None:
        self._sections: dict[str, dict[str, list[list[str]]]] = {sec: {} for sec in SECTIONS}

    # ── mutation ─────────────────────────────────────────────

    def add_rule(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        self._section(sec).setdefault(ptype, []).append(list(rule))

    def remove_rule(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Drop the first occurrence of *rule*.  Returns ``False`` if absent."""
        rules = self._section(sec).get(ptype, [])
        try:
            rules.remove(list(rule))
        except ValueError:
            return False
        return True

    def load_policy_line(self, tokens: Sequence[str]) -> None:
        """Add a decoded ``[ptype, *fields]`` line.

        The section is the first character of the tag, so ``"p2"`` lands
        in ``p`` and ``"g"`` in ``g``.  Lines for untracked sections are
        skipped.
        """
        if not tokens or not tokens[0]:
            logger.warning("Skipping policy line without a rule type: %r", list(tokens))
            return
        ptype = tokens[0]
        sec = ptype[0]
        if sec not in self._sections:
            logger.warning("Skipping policy line for unknown section %r: %r", sec, list(tokens))
            return
        self.add_rule(sec, ptype, tokens[1:])

    def clear(self) -> None:
        for rules_by_type in self._sections.values():
            rules_by_type.clear()

    # ── queries ──────────────────────────────────────────────

    def has_rule(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        return list(rule) in self._section(sec).get(ptype, [])

    def get_rules(self, sec: str, ptype: str) -> list[list[str]]:
        """Return a copy of the rules stored under ``(sec, ptype)``."""
        return [list(rule) for rule in self._section(sec).get(ptype, [])]

    def ptypes(self, sec: str) -> list[str]:
        return list(self._section(sec))

    def iter_rules(self, sec: str) -> Iterator[tuple[str, list[str]]]:
        """Yield ``(ptype, rule)`` pairs for *sec* in insertion order."""
        for ptype, rules in self._section(sec).items():
            for rule in rules:
                yield ptype, rule

    def to_dict(self) -> dict[str, dict[str, list[list[str]]]]:
        """Return a plain-dict snapshot, omitting empty rule types."""
        return {
            sec: {ptype: [list(r) for r in rules] for ptype, rules in by_type.items() if rules}
            for sec, by_type in self._sections.items()
        }

    def __len__(self) -> int:
        return sum(len(rules) for by_type in self._sections.values() for rules in by_type.values())

    def _section(self, sec: str) -> dict[str, list[list[str]]]:
        try:
            return self._sections[sec]
        except KeyError:
            raise KeyError(f"Unknown policy section '{sec}' (expected one of {SECTIONS})") from None
