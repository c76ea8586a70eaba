"""
Fuzzy matching of abbreviations against snippet keys and keywords
"""

from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def scoreMatch(abbr: str, string: str, partial: bool = False) -> float:
    """
    Score how well `abbr` abbreviates `string`.

    Every abbreviation character must appear in the candidate in order.
    Matches nearer the candidate start weigh more, and a match right after
    a `-` counts double so that word initials win (`bgc` for
    `background-color`).

    Args:
        abbr: Abbreviation to score
        string: Candidate text
        partial: Accept a prefix of `abbr` matching; the unmatched tail
            lowers the score instead of failing

    Returns:
        1 for an exact match, 0 for no match, otherwise a value in (0, 1)

    Example:
        >>> scoreMatch('bgc', 'background-color') > scoreMatch('bgc', 'background-clip')
        True
    """
    abbr = abbr.lower()
    string = string.lower()

    if abbr == string:
        return 1
    if not abbr or not string or abbr[0] != string[0]:
        return 0

    abbr_len = len(abbr)
    str_len = len(string)
    i = 1
    j = 1
    score = str_len

    while i < abbr_len:
        ch = abbr[i]
        found = False
        acronym = False

        while j < str_len:
            if ch == string[j]:
                found = True
                score += (str_len - j) * (2 if acronym else 1)
                break
            acronym = string[j] == '-'
            j += 1

        if not found:
            if not partial:
                return 0
            break
        i += 1

    match_ratio = i / abbr_len
    return score * match_ratio / triangular(str_len)


def triangular(n: int) -> float:
    return n * (n + 1) / 2


def bestMatch_find(abbr: str, items: Iterable[T], min_score: float = 0,
                   partial: bool = False, key: Optional[Callable[[T], str]] = None) -> Optional[T]:
    """
    Highest-scoring item for `abbr`

    An exact match returns immediately; among equal scores the first item
    wins. Returns None when nothing scores or the best is below `min_score`.
    """
    matched: Optional[T] = None
    max_score: float = 0

    for item in items:
        score = scoreMatch(abbr, key(item) if key else str(item), partial)
        if score == 1:
            return item
        if score and score > max_score:
            max_score = score
            matched = item

    return matched if matched is not None and max_score >= min_score else None
