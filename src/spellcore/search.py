from __future__ import annotations
from collections import deque
from typing import List, Optional
from .models import Suggestion, Verbosity
from .deletes import string_hash, delete_in_suggestion_prefix
from .distance import damerau_osa
from .DB.index import DeleteIndex


def _effective_bound(index: DeleteIndex, max_edit_distance: Optional[int]) -> int:
    if max_edit_distance is None or max_edit_distance < 0:
        return index.max_edit_distance
    return min(int(max_edit_distance), index.max_edit_distance)


def lookup(
    query: str,
    index: DeleteIndex,
    verbosity: Verbosity | str = Verbosity.CLOSEST,
    max_edit_distance: Optional[int] = None,
) -> List[Suggestion]:
    """
    Spelling suggestions for `query` within the edit-distance bound.

    The query prefix and its deletions are hashed and probed in breadth-first order
    (shortest deletions last). Terms found in a bucket are pre-filtered by length and
    prefix order, then verified with a bounded OSA distance.

      TOP     -> at most one suggestion (smallest distance, then highest frequency)
      CLOSEST -> all suggestions at the smallest distance found
      ALL     -> every suggestion within the bound (unsorted)

    For TOP/CLOSEST the working bound shrinks to the best distance found so far.
    """
    verbosity = Verbosity.parse(verbosity)
    bound = _effective_bound(index, max_edit_distance)
    store = index.store
    prefix_length = index.prefix_length

    suggestions: List[Suggestion] = []
    query_len = len(query)

    # nothing stored can be that long
    if index.max_word_length > 0 and query_len - bound > index.max_word_length:
        return suggestions

    exact = store.get_frequency(query)
    if exact is not None:
        suggestions.append(Suggestion(query, 0, exact))
        if verbosity is not Verbosity.ALL:
            return suggestions

    if bound == 0:
        return suggestions

    considered_deletes: set[str] = set()
    considered_terms: set[str] = {query}
    working = bound

    query_prefix_len = min(query_len, prefix_length)
    candidates = deque([query[:query_prefix_len]])

    while candidates:
        candidate = candidates.popleft()
        candidate_len = len(candidate)
        length_diff = query_prefix_len - candidate_len

        # candidates only get shorter from here on
        if length_diff > working:
            if verbosity is Verbosity.ALL:
                continue
            break

        for term in store.get_terms(string_hash(candidate)):
            if term == query:
                continue
            term_len = len(term)
            if abs(term_len - query_len) > working:
                continue
            if term_len < candidate_len:
                continue
            if term_len == candidate_len and term != candidate:
                continue
            term_prefix_len = min(term_len, prefix_length)
            if term_prefix_len > query_prefix_len and term_prefix_len - candidate_len > working:
                continue
            if not delete_in_suggestion_prefix(candidate, term, prefix_length):
                continue
            if term in considered_terms:
                continue
            considered_terms.add(term)

            distance = damerau_osa(query, term, working)
            if distance > working:
                continue

            frequency = store.get_frequency(term)
            item = Suggestion(term, distance, frequency if frequency is not None else 0)

            if verbosity is Verbosity.TOP:
                if not suggestions:
                    working = distance
                    suggestions.append(item)
                elif distance < working or (
                    distance == working and item.frequency > suggestions[0].frequency
                ):
                    working = distance
                    suggestions[0] = item
            elif verbosity is Verbosity.CLOSEST:
                if distance < working:
                    suggestions.clear()
                    working = distance
                    suggestions.append(item)
                elif distance == working:
                    suggestions.append(item)
            else:
                suggestions.append(item)

        # expand: one more deletion from this candidate
        if length_diff < bound and candidate_len <= prefix_length:
            if verbosity is not Verbosity.ALL and length_diff >= working:
                continue
            for i in range(candidate_len):
                deleted = candidate[:i] + candidate[i + 1:]
                if deleted not in considered_deletes:
                    considered_deletes.add(deleted)
                    candidates.append(deleted)

    if verbosity is not Verbosity.ALL and suggestions:
        suggestions.sort(key=lambda s: (s.distance, -s.frequency))
        if verbosity is Verbosity.CLOSEST:
            best = suggestions[0].distance
            suggestions = [s for s in suggestions if s.distance == best]

    return suggestions
