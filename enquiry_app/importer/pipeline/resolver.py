"""
Column resolution for loosely-structured spreadsheets.

Headers are matched against each canonical field's aliases through an ordered
chain of tiers: exact text, then case-insensitive, then a normalized form that
ignores whitespace and ``. - _ /``. Within a tier, aliases are tried in order.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from enquiry_app.utils.normalizers import is_blank_cell

_HEADER_NOISE = re.compile(r"[\s.\-_/]")


def normalize_header(text: str) -> str:
    return _HEADER_NOISE.sub("", str(text)).casefold()


class MatchTier(ABC):
    """One rule for deciding whether a header spells an alias."""

    name: str = "tier"

    @abstractmethod
    def matches(self, header: str, alias: str) -> bool:
        raise NotImplementedError


class ExactHeaderTier(MatchTier):
    name = "exact"

    def matches(self, header: str, alias: str) -> bool:
        return header == alias


class CaseInsensitiveHeaderTier(MatchTier):
    name = "case_insensitive"

    def matches(self, header: str, alias: str) -> bool:
        return header.casefold() == alias.casefold()


class NormalizedHeaderTier(MatchTier):
    name = "normalized"

    def matches(self, header: str, alias: str) -> bool:
        return normalize_header(header) == normalize_header(alias)


DEFAULT_TIERS: Tuple[MatchTier, ...] = (
    ExactHeaderTier(),
    CaseInsensitiveHeaderTier(),
    NormalizedHeaderTier(),
)


class ColumnResolver:
    """Resolve canonical field values from rows keyed by arbitrary headers."""

    def __init__(
        self,
        aliases: Mapping[str, Iterable[str]],
        tiers: Sequence[MatchTier] = DEFAULT_TIERS,
    ) -> None:
        self._aliases: Dict[str, Tuple[str, ...]] = {
            field: tuple(dict.fromkeys(str(alias) for alias in names)) for field, names in aliases.items()
        }
        self._tiers: Tuple[MatchTier, ...] = tuple(tiers)
        # Rows from one sheet share headers, so candidate lists are computed once per header set.
        self._plans: Dict[Tuple[Tuple[str, ...], str], Tuple[str, ...]] = {}
        self._consumed: Dict[str, bool] = {}

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self._aliases)

    @property
    def tiers(self) -> Tuple[MatchTier, ...]:
        return self._tiers

    def aliases_for(self, field: str) -> Tuple[str, ...]:
        try:
            return self._aliases[field]
        except KeyError:
            raise KeyError(f"Unknown canonical field '{field}'") from None

    def _candidate_headers(self, headers: Tuple[str, ...], field: str) -> Tuple[str, ...]:
        key = (headers, field)
        plan = self._plans.get(key)
        if plan is None:
            ordered: Dict[str, None] = {}
            for tier in self._tiers:
                for alias in self.aliases_for(field):
                    for header in headers:
                        if tier.matches(header, alias):
                            ordered.setdefault(header, None)
            plan = tuple(ordered)
            self._plans[key] = plan
        return plan

    def resolve(self, row: Mapping[Any, Any], field: str) -> Optional[Any]:
        """Return the first non-blank value for ``field``, or None."""
        headers = tuple(header for header in row.keys() if isinstance(header, str))
        for header in self._candidate_headers(headers, field):
            value = row.get(header)
            if not is_blank_cell(value):
                return value
        return None

    def consumes(self, header: str) -> bool:
        """True when ``header`` spells an alias of any canonical field under any tier."""
        cached = self._consumed.get(header)
        if cached is None:
            cached = any(
                tier.matches(header, alias)
                for tier in self._tiers
                for aliases in self._aliases.values()
                for alias in aliases
            )
            self._consumed[header] = cached
        return cached

    def with_extra_aliases(self, field: str, *aliases: str) -> "ColumnResolver":
        """Return a resolver that tries ``aliases`` before the existing ones for ``field``."""
        extra = tuple(alias for alias in aliases if alias)
        merged = {name: values for name, values in self._aliases.items()}
        merged[field] = extra + merged.get(field, ())
        return ColumnResolver(merged, self._tiers)
