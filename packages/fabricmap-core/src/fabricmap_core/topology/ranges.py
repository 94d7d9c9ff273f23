"""Range folding of sibling identifiers.

    fold(["vm-11", "vm-12", "vm-13", "vm-14", "vm-20"])  ->  ["vm-[11-14,20]"]
    fold(["rack-01", "rack-1"])                          ->  ["rack-01", "rack-1"]
    fold(["pa8b", "pa8c"])                               ->  ["pa8[b,c]"]

An identifier is split into a prefix and its maximal trailing run of ASCII
digits. Identifiers fold together only when both the prefix and the width of
the digit run match, so zero padding survives a round trip. Identifiers
without a numeric suffix fold only when they differ in a single trailing
letter.

expand() is the inverse: expand(",".join(fold(ids))) gives back every
identifier exactly once.
"""

import re
from collections import defaultdict
from collections.abc import Iterable

from fabricmap_core.codebase.sorting import natural_key

_NUMERIC_SUFFIX_RE = re.compile(r"(.*?)([0-9]+)", re.DOTALL)
_BRACKET_RE = re.compile(r"(.*?)\[([^\[\]]*)\]([^\[\]]*)", re.DOTALL)
_RANGE_RE = re.compile(r"([0-9]+)-([0-9]+)")
_RESERVED = set("[],")


def split_suffix(identifier: str) -> tuple[str, str]:
    """Split into (prefix, numeric suffix); the suffix is "" when the ID does not end in a digit."""
    m = _NUMERIC_SUFFIX_RE.fullmatch(identifier)
    if m is None:
        return identifier, ""
    return m.group(1), m.group(2)


def _runs(values: list[int]) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    for v in values:
        if runs and v == runs[-1][1] + 1:
            runs[-1] = (runs[-1][0], v)
        else:
            runs.append((v, v))
    return runs


def _format_run(start: int, end: int, width: int) -> str:
    if start == end:
        return f"{start:0{width}d}"
    return f"{start:0{width}d}-{end:0{width}d}"


def fold(identifiers: Iterable[str]) -> list[str]:
    """Fold identifiers into the fewest bracketed expressions, ordered naturally by first member."""
    numeric: dict[tuple[str, int], set[int]] = defaultdict(set)
    lettered: dict[str, set[str]] = defaultdict(set)
    entries: list[tuple[tuple, str]] = []

    for identifier in set(identifiers):
        if not identifier:
            continue
        if _RESERVED & set(identifier):
            entries.append((natural_key(identifier), identifier))
            continue
        prefix, suffix = split_suffix(identifier)
        if suffix:
            numeric[(prefix, len(suffix))].add(int(suffix))
        elif len(identifier) > 1 and identifier[-1].isalpha():
            lettered[identifier[:-1]].add(identifier[-1])
        else:
            entries.append((natural_key(identifier), identifier))

    for (prefix, width), value_set in numeric.items():
        values = sorted(value_set)
        first = f"{prefix}{values[0]:0{width}d}"
        if len(values) == 1:
            entries.append((natural_key(first), first))
            continue
        body = ",".join(_format_run(start, end, width) for start, end in _runs(values))
        entries.append((natural_key(first), f"{prefix}[{body}]"))

    for prefix, letter_set in lettered.items():
        letters = sorted(letter_set)
        first = prefix + letters[0]
        if len(letters) == 1:
            entries.append((natural_key(first), first))
            continue
        entries.append((natural_key(first), f"{prefix}[{','.join(letters)}]"))

    entries.sort(key=lambda e: e[0])
    return [text for _, text in entries]


def fold_string(identifiers: Iterable[str], separator: str = ",") -> str:
    return separator.join(fold(identifiers))


def _split_top_level(expression: str) -> list[str]:
    tokens: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in expression:
        if ch == "[":
            depth += 1
            if depth > 1:
                raise ValueError(f"nested brackets in {expression!r}")
        elif ch == "]":
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced brackets in {expression!r}")
        if ch == "," and depth == 0:
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
    if depth != 0:
        raise ValueError(f"unbalanced brackets in {expression!r}")
    tokens.append("".join(current))
    return [t.strip() for t in tokens]


def _expand_item(item: str) -> list[str]:
    m = _RANGE_RE.fullmatch(item)
    if m is None:
        if not item or "-" in item:
            raise ValueError(f"invalid range item {item!r}")
        return [item]
    start_s, end_s = m.groups()
    start, end = int(start_s), int(end_s)
    if start > end:
        raise ValueError(f"descending range {item!r}")
    width = len(start_s)
    return [f"{v:0{width}d}" for v in range(start, end + 1)]


def expand(expression: str) -> list[str]:
    """Expand a folded expression ("n[1-3,7],pa8[b,c],x") back into identifiers, in order."""
    result: list[str] = []
    for token in _split_top_level(expression):
        if not token:
            raise ValueError(f"empty element in {expression!r}")
        if "[" not in token:
            if "]" in token:
                raise ValueError(f"unbalanced brackets in {token!r}")
            result.append(token)
            continue
        m = _BRACKET_RE.fullmatch(token)
        if m is None:
            raise ValueError(f"invalid range expression {token!r}")
        prefix, body, suffix = m.groups()
        for item in body.split(","):
            result.extend(f"{prefix}{value}{suffix}" for value in _expand_item(item.strip()))
    return result
