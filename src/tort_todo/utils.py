from __future__ import annotations

from typing import Iterable, List, Tuple

PROJECT_SIGIL = "+"
CONTEXT_SIGIL = "@"


# PUBLIC_INTERFACE
def split_tags(subject: str) -> Tuple[List[str], List[str]]:
    """
    Extract +project and @context tags from a subject.

    Args:
        subject: Free text; tags are whitespace-delimited words starting with a sigil.

    Returns:
        (projects, contexts), in order of appearance, sigils stripped. A bare
        sigil with nothing after it is not a tag.
    """
    projects: List[str] = []
    contexts: List[str] = []
    for word in subject.split():
        tag = word[1:]
        if not tag:
            continue
        if word.startswith(PROJECT_SIGIL):
            projects.append(tag)
        elif word.startswith(CONTEXT_SIGIL):
            contexts.append(tag)
    return projects, contexts


# PUBLIC_INTERFACE
def lowest_free_id(used: Iterable[int]) -> int:
    """Return the smallest positive integer not present in `used`."""
    taken = {i for i in used if i > 0}
    candidate = 1
    while candidate in taken:
        candidate += 1
    return candidate
