"""Edit-distance ranking of near-miss name candidates."""

from rapidfuzz.distance import Levenshtein

from signup_recon import ExternalRecord
from signup_recon.identity import normalize_name

MAX_SUGGESTIONS = 3


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute).

    No normalization is applied; pass already-normalized names.

    Args:
        a: First string.
        b: Second string.

    Returns:
        Minimum number of single-character edits turning ``a`` into ``b``.
    """
    return Levenshtein.distance(a, b, weights=(1, 1, 1))


def rank_candidates(
    name: str,
    candidates: list[ExternalRecord],
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Rank signup names by edit distance to a roster name.

    Candidates with an empty normalized name are skipped. Ordering is
    distance ascending, then the candidate name as written; repeated
    names are reported once.

    Args:
        name: Normalized roster player name.
        candidates: Signup records sharing the player's birthday.
        limit: Maximum number of names to return.

    Returns:
        Up to ``limit`` distinct candidate names, closest first.
    """
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        candidate_name = normalize_name(candidate.raw_name)
        if not candidate_name:
            continue
        scored.append((levenshtein(name, candidate_name), candidate.raw_name))
    scored.sort()

    suggestions: list[str] = []
    for _distance, raw_name in scored:
        if raw_name in suggestions:
            continue
        suggestions.append(raw_name)
        if len(suggestions) == limit:
            break
    return suggestions
