from __future__ import annotations


def damerau_osa(s1: str, s2: str, max_distance: int) -> int:
    """
    Bounded optimal-string-alignment distance between s1 and s2.

    Insertions, deletions, substitutions and swaps of two adjacent characters
    each cost 1 (a swapped pair is never edited again, unlike unrestricted
    Damerau-Levenshtein).

    Returns max_distance + 1 as soon as the result is known to exceed the bound:
      * the length difference alone is larger than the bound, or
      * every cell of a DP row is larger than the bound.
    """
    len1, len2 = len(s1), len(s2)
    if abs(len1 - len2) > max_distance:
        return max_distance + 1

    # three rolling rows: i-2 (for swaps), i-1, i
    before = [0] * (len2 + 1)
    previous = list(range(len2 + 1))
    current = [0] * (len2 + 1)

    for i in range(1, len1 + 1):
        c1 = s1[i - 1]
        current[0] = i
        row_min = i
        for j in range(1, len2 + 1):
            c2 = s2[j - 1]
            cost = 0 if c1 == c2 else 1
            value = min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            if i > 1 and j > 1 and c1 == s2[j - 2] and s1[i - 2] == c2:
                value = min(value, before[j - 2] + 1)
            current[j] = value
            if value < row_min:
                row_min = value

        if row_min > max_distance:
            return max_distance + 1

        before, previous, current = previous, current, before

    distance = previous[len2]
    return distance if distance <= max_distance else max_distance + 1
