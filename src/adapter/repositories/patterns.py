"""SQL pattern helpers shared by repositories"""

LIKE_ESCAPE = "\\"


def like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in the term escaped"""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
