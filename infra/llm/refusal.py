"""
Refusal detection for transcription responses.

Vision models occasionally decline to transcribe personal documents
("I'm sorry, I can't transcribe the text from this image."). Such replies
are not transcriptions and must be retried rather than written to the
transcript.

The check is a heuristic over the response text. RecognitionClient takes
any `(text) -> bool` predicate, so alternative detectors can be plugged in
without touching the retry loop.
"""

from typing import Callable

RefusalPredicate = Callable[[str], bool]

# Replies shorter than this are checked against the looser phrase list
SHORT_RESPONSE_CHARS = 100

SHORT_REFUSAL_PHRASES = (
    "i'm sorry",
    "i can't",
    "i cannot",
    "unable to",
    "can't assist",
    "can't help",
    "can't transcribe",
    "cannot transcribe",
    "unable to transcribe",
    "i'm unable",
    "sorry, i can't",
)

REFUSAL_PHRASES = (
    "i'm sorry, i can't",
    "i'm sorry, i cannot",
    "i can't assist",
    "i cannot assist",
    "i'm unable to assist",
    "i cannot help",
    "i can't help",
    "i can't transcribe",
    "i cannot transcribe",
    "unable to transcribe",
    "can't transcribe",
    "cannot transcribe",
    "not able to transcribe",
    "not able to assist",
    "not able to help",
    "i'm not able to",
    "i am not able to",
    "content policy",
    "against my usage policies",
    "against my policies",
    "against my guidelines",
    "inappropriate content",
    "violates my",
)

NEGATIONS = ("can't", "cannot", "unable")


def _normalize(text: str) -> str:
    # Curly apostrophes are common in model output
    return text.strip().lower().replace("’", "'")


def is_refusal(text: str) -> bool:
    """Return True if the response looks like a refusal to transcribe."""
    if not text or not text.strip():
        return False

    lowered = _normalize(text)

    if "sorry" in lowered and "transcribe" in lowered:
        if any(negation in lowered for negation in NEGATIONS):
            return True

    if len(text.strip()) < SHORT_RESPONSE_CHARS:
        if any(phrase in lowered for phrase in SHORT_REFUSAL_PHRASES):
            return True

    return any(phrase in lowered for phrase in REFUSAL_PHRASES)
