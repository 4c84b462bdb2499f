from __future__ import annotations
from collections import deque
from typing import List

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_U32 = 0xFFFFFFFF


def string_hash(s: str) -> int:
    """
    Lossy 32-bit bucket key for a deletion variant.

    FNV-1a over the UTF-8 bytes; the low 2 bits are replaced by min(len(s), 3) so
    that short variants land in different buckets. Collisions are expected and are
    resolved by the exact distance check in lookup. Returned as a signed int32.
    """
    h = _FNV_OFFSET
    for b in s.encode("utf-8"):
        h ^= b
        h = (h * _FNV_PRIME) & _U32
    h = (h & ~3 & _U32) | min(len(s), 3)
    return h - (1 << 32) if h & 0x80000000 else h


def edits_prefix(term: str, max_edit_distance: int, prefix_length: int) -> List[str]:
    """
    All distinct strings obtained by deleting 0..max_edit_distance characters from
    the first prefix_length characters of term. The empty string is included when
    the whole term is short enough to be deleted away.
    """
    result: List[str] = []
    seen: set[str] = set()

    if len(term) <= max_edit_distance:
        result.append("")
        seen.add("")

    prefix = term[:prefix_length]
    if prefix not in seen:
        result.append(prefix)
        seen.add(prefix)

    # breadth-first: every variant at depth d has len(prefix) - d characters
    queue = deque([(prefix, 0)])
    while queue:
        word, depth = queue.popleft()
        depth += 1
        if depth > max_edit_distance:
            continue
        for i in range(len(word)):
            deleted = word[:i] + word[i + 1:]
            if deleted not in seen:
                seen.add(deleted)
                result.append(deleted)
                queue.append((deleted, depth))
    return result


def delete_in_suggestion_prefix(delete: str, suggestion: str, prefix_length: int) -> bool:
    """True if the characters of `delete` occur, in order, within suggestion[:prefix_length]."""
    if not delete:
        return True
    limit = min(len(suggestion), prefix_length)
    j = 0
    for ch in delete:
        while j < limit and ch != suggestion[j]:
            j += 1
        if j == limit:
            return False
        j += 1
    return True
