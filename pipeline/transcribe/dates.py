import re

MAX_DATE_LINES = 5

# Checked in order; the first line with any match wins
DATE_PATTERNS = (
    re.compile(r'(?i)(\w+day,?\s+)?(\w+\s+\d{1,2},?\s+\d{4})'),
    re.compile(r'(?i)(\d{1,2}[/-]\d{1,2}[/-]\d{2,4})'),
    re.compile(r'(?i)(\w+\s+\d{1,2},?\s+\d{4})'),
)


def extract_date(text: str) -> str:
    """
    Find a date heading near the top of a transcribed page.

    Only the first five non-blank lines are examined. Returns the matched
    text (a weekday prefix is kept when present) or "" if nothing matches.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    for line in lines[:MAX_DATE_LINES]:
        for pattern in DATE_PATTERNS:
            match = pattern.search(line)
            if match:
                return match.group(0).strip()

    return ""
