"""In-memory vocabulary index and the shared search routine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from langotron.errors import MalformedEntryError

from .lookup_keys import build_lookup_keys
from .models import WORD_LEVELS, WordEntry
from .normalization import candidate_keys, normalize_token, strip_affixes

LevelLoader = Callable[[str], Iterable[WordEntry]]


@dataclass(frozen=True)
class SearchOptions:
    """Options accepted by :func:`search_entries`."""

    levels: Sequence[str] = field(default_factory=lambda: WORD_LEVELS)
    include_forms: bool = True
    include_learned: bool = True
    limit: Optional[int] = None
    exact: bool = False


def ensure_levels(levels: Optional[Iterable[str]]) -> List[str]:
    """Return the known levels from ``levels`` in ascending tier order.

    An empty or missing selection means every level.
    """

    if not levels:
        return list(WORD_LEVELS)
    requested = {str(level).strip() for level in levels}
    return [level for level in WORD_LEVELS if level in requested]


def entry_matches(
    entry: WordEntry,
    search_keys: Sequence[str],
    *,
    include_forms: bool = True,
    exact: bool = False,
) -> bool:
    """Return whether ``entry`` matches any of ``search_keys``.

    Exact mode needs a literal key hit. Fuzzy mode accepts containment in
    either direction between a search key and an entry key.
    """

    entry_keys = build_lookup_keys(entry, include_forms)
    if exact:
        return any(key in entry_keys for key in search_keys)
    for key in search_keys:
        for entry_key in entry_keys:
            if key in entry_key or entry_key in key:
                return True
    return False


def search_entries(
    query: str,
    load_level: LevelLoader,
    options: Optional[SearchOptions] = None,
) -> List[WordEntry]:
    """Search levels in ascending order and return matches in discovery order.

    Args:
        query: Raw search text.
        load_level: Callable returning the entries stored for a level, in
            storage order. Levels after the limit is reached are never loaded.
        options: Search options; defaults scan every level, fuzzily,
            including learned words and alternate forms.

    Returns:
        At most ``options.limit`` entries, tier ascending then storage order.
    """

    resolved = options or SearchOptions()
    if not (query or "").strip():
        return []
    search_keys = candidate_keys(query.strip())
    if not search_keys:
        return []
    if resolved.limit is not None and resolved.limit <= 0:
        return []

    matches: List[WordEntry] = []
    for level in ensure_levels(resolved.levels):
        for entry in load_level(level):
            if not resolved.include_learned and entry.learned:
                continue
            if not entry_matches(
                entry,
                search_keys,
                include_forms=resolved.include_forms,
                exact=resolved.exact,
            ):
                continue
            matches.append(entry)
            if resolved.limit is not None and len(matches) >= resolved.limit:
                return matches
    return matches


class VocabularyIndex:
    """Mapping of normalized key to :class:`WordEntry` for one language.

    Keys are unique: a later :meth:`put` for the same key replaces the
    earlier entry. Iteration follows insertion order.
    """

    def __init__(self, entries: Iterable[WordEntry] = ()) -> None:
        self._entries: Dict[str, WordEntry] = {}
        for entry in entries:
            if entry.key:
                self._entries[entry.key] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[WordEntry]:
        return iter(list(self._entries.values()))

    def items(self) -> List[tuple[str, WordEntry]]:
        return list(self._entries.items())

    def get(self, key: str) -> Optional[WordEntry]:
        return self._entries.get(key)

    @staticmethod
    def key_for(entry: WordEntry) -> str:
        """Return the derived key for ``entry``, empty when it has none."""

        return entry.key

    def put(self, entry: WordEntry, *, key: Optional[str] = None) -> str:
        """Store ``entry`` under ``key`` (default: its own key) and return the key."""

        resolved = key or self.key_for(entry)
        if not resolved:
            raise MalformedEntryError(f"Cannot index word {entry.word!r} without a lookup key.")
        self._entries[resolved] = entry
        return resolved

    def key_of(self, entry: WordEntry) -> Optional[str]:
        """Return the key ``entry`` is stored under, if it is stored."""

        if entry.key and self._entries.get(entry.key) is entry:
            return entry.key
        for key, candidate in self._entries.items():
            if candidate is entry:
                return key
        return None

    def find_exact(self, token: str) -> Optional[WordEntry]:
        """Resolve ``token`` to a stored entry without fuzzy matching.

        Tries the normalized key, then the affix-stripped key, then the
        other forms of every entry in insertion order.
        """

        target = normalize_token(token)
        if not target:
            return None
        direct = self._entries.get(target)
        if direct is not None:
            return direct
        stripped = strip_affixes(target)
        by_root = self._entries.get(stripped)
        if by_root is not None:
            return by_root

        wanted = {target, stripped}
        for entry in list(self._entries.values()):
            for form in entry.other_forms:
                form_key = normalize_token(form.word)
                if not form_key:
                    continue
                if form_key in wanted or strip_affixes(form_key) in wanted:
                    return entry
        return None

    def entries_for_level(self, level: str) -> List[WordEntry]:
        return [entry for entry in list(self._entries.values()) if entry.level == level]

    def search(self, query: str, options: Optional[SearchOptions] = None) -> List[WordEntry]:
        """Search stored entries; see :func:`search_entries`."""

        return search_entries(query, self.entries_for_level, options)


__all__ = [
    "SearchOptions",
    "VocabularyIndex",
    "ensure_levels",
    "entry_matches",
    "search_entries",
]
