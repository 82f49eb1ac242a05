"""Utility functions for the room registry.

This module contains helper functions used across the application:
- group_adjacent: Group sorted row positions into contiguous runs
- non_blank_rows: Drop empty rows from a table read
- similarity_score: Canonical fuzzy string matching algorithm
- find_similar_strings: Find similar strings using fuzzy matching
"""


def group_adjacent(positions: list[int]) -> list[tuple[int, int]]:
    """Group adjacent row positions into (start, count) runs.

    The groups are returned highest start first, so deleting them in order
    never shifts a row that a later group still points at.

    Args:
        positions: Row positions, strictly ascending with no duplicates

    Returns:
        List of (start, count) tuples ordered by descending start
    """
    groups = []
    for i, position in enumerate(positions):
        if i == 0 or position != positions[i - 1] + 1:
            groups.append([position, 1])
        else:
            groups[-1][1] += 1
    return [(start, count) for start, count in reversed(groups)]


def non_blank_rows(rows: list[list]) -> list[list[str]]:
    """Return the rows that have at least one non-empty cell, as strings."""
    cleaned = [['' if cell is None else str(cell) for cell in row] for row in rows]
    return [row for row in cleaned if ''.join(row) != '']


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Find similar strings using simple similarity scoring.

    Args:
        target: The string to match against
        candidates: List of candidate strings to search
        limit: Maximum number of results to return

    Returns:
        List of similar strings, sorted by similarity score (most similar first)
    """
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]

    filtered = [(c, s) for c, s in scored if s > 0]
    sorted_matches = sorted(filtered, key=lambda x: x[1], reverse=True)

    return [c for c, s in sorted_matches[:limit]]
