"""Tag list normalization."""

from typing import Iterable, List, Optional, Union

TAG_DELIMITER = ","


def normalize_tags(raw: Optional[Union[str, Iterable[str]]]) -> List[str]:
    """
    Turn a raw tag list into the ordered, de-duplicated list stored for a post.

    Accepts a comma-delimited string or an iterable of strings (each item may
    itself contain commas). Tokens are trimmed; empty and whitespace-only
    tokens are dropped; the first occurrence of a tag wins. Case is kept
    as-is, so "PSO2" and "pso2" are different tags.

    Examples:
        >>> normalize_tags("pso2, pso2 , meme,  ")
        ['pso2', 'meme']
        >>> normalize_tags(["drake meme", "meme, pso2"])
        ['drake meme', 'meme', 'pso2']
        >>> normalize_tags(None)
        []
    """
    if raw is None:
        return []
    chunks = [raw] if isinstance(raw, str) else list(raw)

    seen = set()
    tags: List[str] = []
    for chunk in chunks:
        for token in str(chunk).split(TAG_DELIMITER):
            tag = token.strip()
            if tag and tag not in seen:
                seen.add(tag)
                tags.append(tag)
    return tags
