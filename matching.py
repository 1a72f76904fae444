"""Answer normalization and word-overlap scoring for dictation attempts."""

STRIP_CHARS = str.maketrans("", "", ".!?,")


def normalize(text: str) -> str:
    """Lowercase, drop . ! ? , and trim surrounding whitespace."""
    return text.lower().translate(STRIP_CHARS).strip()


def is_exact_match(candidate: str, target: str) -> bool:
    return normalize(candidate) == normalize(target)


def partial_overlap(candidate: str, target: str) -> list:
    """
    Words of *candidate* that also occur in *target*.

    Candidate order is kept and each word is listed once, at its first
    occurrence. An empty list means nothing matched.
    """
    target_words = set(normalize(target).split())
    matched = []
    seen = set()
    for word in normalize(candidate).split():
        if word in target_words and word not in seen:
            matched.append(word)
            seen.add(word)
    return matched
