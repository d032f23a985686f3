"""Documentation-impact label policy.

An issue may stay closed only when it carries one of the two docs-impact
labels. Matching is exact and case-sensitive.
"""

from typing import Any, Iterable, List, Sequence

from .config import DOCS_HAS_IMPACT, DOCS_NO_IMPACT


def _name(label: Any) -> str:
    # Label models and plain strings are both accepted
    if isinstance(label, str):
        return label
    return label.name or ""


def label_names(labels: Iterable[Any]) -> List[str]:
    """Return the label names in their original order."""
    return [_name(label) for label in labels]


def has_doc_labels(
    labels: Iterable[Any],
    required: Sequence[str] = (DOCS_HAS_IMPACT, DOCS_NO_IMPACT),
) -> bool:
    """Check whether any label satisfies the documentation-impact requirement.

    Args:
        labels: Labels attached to the issue, as Label models or names.
        required: Label names that count as a docs-impact decision.

    Returns:
        True if at least one label name equals one of ``required``.
    """
    return any(_name(label) in required for label in labels)
