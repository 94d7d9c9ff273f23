import re

_CHUNK_RE = re.compile(r"([0-9]+)")


def natural_key(value: str) -> tuple:
    """Sort key comparing digit runs numerically and everything else lexically.

    "n2" < "n10" < "p1". The raw string is the last element so values that
    compare equal numerically ("n01" and "n1") still have a stable order.
    """
    chunks = []
    for chunk in _CHUNK_RE.split(value):
        if not chunk:
            continue
        if chunk.isascii() and chunk.isdigit():
            chunks.append((0, int(chunk), ""))
        else:
            chunks.append((1, 0, chunk))
    return (tuple(chunks), value)
