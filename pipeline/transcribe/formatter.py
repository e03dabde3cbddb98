from typing import Iterable

from .schemas import PageResult

SEPARATOR = "---"


def format_transcript(results: Iterable[PageResult], start_date: str = "") -> str:
    """
    Render page results as one transcript, in ordinal order.

    Each page is a block of "---", the image name, an optional date line
    and the text (or inline failure message), each newline-terminated.
    A page without its own date inherits the most recent date seen,
    seeded by start_date; nothing is emitted while that is still empty.
    """
    lines = []
    last_date = start_date

    for result in sorted(results, key=lambda r: r.ordinal):
        lines.append(SEPARATOR)
        lines.append(result.name)

        if result.date:
            last_date = result.date
        if last_date:
            lines.append(last_date)

        lines.append(result.display_text)

    return "".join(f"{line}\n" for line in lines)
