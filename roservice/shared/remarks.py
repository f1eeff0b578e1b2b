"""
Free-text field codecs

Bookings carry customer details inside a single remarks string
("Name: Asha, Phone: 9876543210, Address: 12 MG Road, Problem: No water flow")
and reports carry a human readable parts summary ("Sediment Filter x2, Membrane x1").
These helpers encode and decode both formats.
"""

from typing import Iterable, Optional

FIELD_SEPARATOR = ", "
KEY_SEPARATOR = ": "
QUANTITY_SEPARATOR = " x"
NOTE_KEY = "Note"

# Canonical field -> display key used when encoding
FIELD_KEYS = {
    "name": "Name",
    "phone": "Phone",
    "address": "Address",
    "problem": "Problem",
}

# Decode order: the first canonical field whose token appears in the key wins.
# "name" goes last so keys like "Phone Name" still resolve to phone.
FIELD_MATCHERS = (
    ("phone", ("phone", "mobile")),
    ("address", ("address",)),
    ("problem", ("problem", "issue")),
    ("name", ("name", "customer")),
)


def _split_pairs(text: Optional[str]) -> list[tuple[str, str]]:
    """
    Split remarks into (key, value) pairs, keeping order and unknown keys.

    A segment without a colon continues the previous value
    ("Address: 12 MG Road, Pune"); free text before the first key is kept
    under "Note".
    """
    pairs: list[tuple[str, str]] = []
    if not text:
        return pairs

    for segment in text.split(","):
        if ":" in segment:
            key, value = segment.split(":", 1)
            key, value = key.strip(), value.strip()
            if key:
                pairs.append((key, value))
                continue
            segment = value
        segment = segment.strip()
        if not segment:
            continue
        if pairs:
            key, value = pairs[-1]
            pairs[-1] = (key, f"{value}{FIELD_SEPARATOR}{segment}" if value else segment)
        else:
            pairs.append((NOTE_KEY, segment))
    return pairs


def match_field(key: str) -> Optional[str]:
    """Map a free-text key to its canonical field name, or None"""
    lowered = key.lower()
    for field, tokens in FIELD_MATCHERS:
        if any(token in lowered for token in tokens):
            return field
    return None


def decode_remarks(text: Optional[str]) -> dict[str, str]:
    """
    Extract name/phone/address/problem from a remarks string.

    Keys are matched case-insensitively by substring, so "Customer Phone"
    and "phone" both land in ``phone``. When two keys map to the same field
    the later one wins.
    """
    fields: dict[str, str] = {}
    for key, value in _split_pairs(text):
        field = match_field(key)
        if field:
            fields[field] = value
    return fields


def encode_remarks(fields: dict[str, Optional[str]], existing: Optional[str] = None) -> str:
    """
    Merge ``fields`` into ``existing`` remarks and serialize as "Key: value, ...".

    ``fields`` may use canonical names ("phone") or display keys ("Phone").
    Values replace existing entries with the same key (case-insensitive);
    unrecognized existing entries are kept in place. None values are skipped.
    """
    pairs = _split_pairs(existing)

    for raw_key, value in fields.items():
        if value is None:
            continue
        key = FIELD_KEYS.get(raw_key, raw_key)
        value = str(value).strip()
        for index, (existing_key, _) in enumerate(pairs):
            if existing_key.lower() == key.lower():
                pairs[index] = (existing_key, value)
                break
        else:
            pairs.append((key, value))

    return FIELD_SEPARATOR.join(f"{key}{KEY_SEPARATOR}{value}" for key, value in pairs)


def format_parts_summary(items: Iterable[tuple[str, int]]) -> str:
    """[("Filter", 2), ("Membrane", 1)] -> "Filter x2, Membrane x1" """
    return FIELD_SEPARATOR.join(f"{name}{QUANTITY_SEPARATOR}{quantity}" for name, quantity in items)


def parse_parts_summary(summary: Optional[str]) -> list[tuple[str, int]]:
    """
    Inverse of format_parts_summary.

    Only reliable when part names never contain ", " or end in " x<digits>".
    Entries that do not parse are skipped.
    """
    items: list[tuple[str, int]] = []
    if not summary:
        return items

    for entry in summary.split(FIELD_SEPARATOR):
        name, sep, quantity = entry.strip().rpartition(QUANTITY_SEPARATOR)
        if not sep or not name:
            continue
        try:
            items.append((name, int(quantity)))
        except ValueError:
            continue
    return items
