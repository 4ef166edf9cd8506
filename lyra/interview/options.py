"""
Option normalization.

The question catalog is not guaranteed to encode options uniformly. Options
may arrive as a list of {label, id} records, as a single record whose label
packs every choice into one delimited string, or as a plain delimited
string. All three become an ordered list of {"id", "label"} dicts.
"""
import re
from typing import Any, Dict, List

from lyra.data.catalog import Question

# Separators allowed inside a packed single-record label, including
# enumerations such as "Yes 2) No 3) Maybe". A digit after "." or "-" makes
# it a decimal or a range ("Under 12.5 m", "10-20 m"), not an enumeration.
PACKED_LABEL_SPLIT = re.compile(r"\n|\||;|,|\s\d+\)|\s\d+\.(?!\d)|\s\d+-(?!\d)")
# Separators allowed in a raw options string
RAW_STRING_SPLIT = re.compile(r"\n|\||;|,")


def _split_labels(raw: str, pattern: re.Pattern) -> List[Dict[str, str]]:
    labels = [part.strip() for part in pattern.split(raw)]
    labels = [label for label in labels if label]
    return [{"id": str(i + 1), "label": label} for i, label in enumerate(labels)]


def _record_label(item: Any) -> str:
    if isinstance(item, dict):
        label = item.get("label")
        return "" if label is None else str(label)
    return ""


def normalize_options(question: Any) -> List[Dict[str, str]]:
    """
    Parse a question's options into [{"id": ..., "label": ...}].

    Args:
        question: Question model, or any dict with an "options" key

    Returns:
        Ordered list of selectable options (empty when the encoding is unknown)
    """
    if isinstance(question, Question):
        raw = question.options
    elif isinstance(question, dict):
        raw = question.get("options")
    else:
        raw = getattr(question, "options", None)

    if raw is None:
        return []

    if isinstance(raw, str):
        return _split_labels(raw, RAW_STRING_SPLIT)

    if not isinstance(raw, list) or not raw:
        return []

    # One record carrying every choice in its label
    if len(raw) == 1 and _record_label(raw[0]) and PACKED_LABEL_SPLIT.search(_record_label(raw[0])):
        return _split_labels(_record_label(raw[0]), PACKED_LABEL_SPLIT)

    if _record_label(raw[0]):
        options = []
        for item in raw:
            label = _record_label(item) if isinstance(item, dict) else ("" if item is None else str(item))
            if not label.strip():
                continue
            option_id = item.get("id") if isinstance(item, dict) else None
            options.append({
                "id": str(option_id) if option_id not in (None, "") else label,
                "label": label.strip(),
            })
        return options

    # Plain list of strings
    if all(isinstance(item, str) for item in raw):
        labels = [item.strip() for item in raw if item.strip()]
        return [{"id": label, "label": label} for label in labels]

    return []


def option_labels(question: Any) -> List[str]:
    """Just the labels, in order."""
    return [option["label"] for option in normalize_options(question)]
