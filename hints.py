"""
Progressive hint ladder.

Each hint request moves a user one rung up:

    0  word count
    1  letters per word, with a blank mask
    2  word class (always "noun"; no tagger behind it)
    3  initials
    4+ reveal one more leading word per request, until the whole sentence
       is shown and the item closes
"""

BLANK = "_"
PLACEHOLDER_WORD_CLASS = "noun"
FIRST_REVEAL_LEVEL = 4


def mask(word: str) -> str:
    return BLANK * len(word)


def initial_mask(word: str) -> str:
    if not word:
        return ""
    return word[0] + BLANK * (len(word) - 1)


def hint(sentence: str, level: int) -> tuple:
    """Return ``(hint_text, closes)`` for the given rung of the ladder."""
    words = sentence.split()

    if level <= 0:
        return (f"Word count: {len(words)}", False)

    if level == 1:
        lengths = ", ".join(str(len(w)) for w in words)
        masks = " ".join(mask(w) for w in words)
        return (f"Letters per word: {lengths} {masks}", False)

    if level == 2:
        classes = ", ".join(PLACEHOLDER_WORD_CLASS for _ in words)
        return (f"Word class: {classes}", False)

    initials = [initial_mask(w) for w in words]
    if level == 3:
        return ("Initials: " + " ".join(initials), False)

    reveal = level - (FIRST_REVEAL_LEVEL - 1)
    if reveal < len(words):
        shown = " ".join(words[:reveal])
        rest = " ".join(initials[reveal:])
        return (f"First {reveal} word(s): {shown} {rest}", False)
    return (f"The whole sentence is out. Answer: {sentence}", True)
