"""Question library editor view.

Groups the flat question list by category in the editor's display order.
Which categories are expanded is caller-supplied state: the set of expanded
category keys comes in with the request and is echoed back on each category,
so a re-render after a reorder keeps the same panels open.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from survey_admin.logic.reorder import Item, group_items

# Display order of the standard categories; anything else follows alphabetically
CATEGORY_ORDER = (
    "GHG",
    "Energy",
    "Transportation",
    "Water",
    "Eco Impacts",
    "Waste",
    "Materials",
    "Circularity",
    "Employee H&S",
    "Employee Experience",
    "DEI",
    "Community",
    "Customer",
    "Supply Chain",
    "G&L",
)

DISPLAY_NAMES = {
    "GHG": "Greenhouse Gas Emissions",
    "Employee H&S": "Employee Health & Safety",
    "DEI": "Diversity, Equity & Inclusion",
    "G&L": "Governance & Leadership",
}


def display_name(category: str) -> str:
    return DISPLAY_NAMES.get(category, category)


def sorted_category_names(categories: Iterable[str]) -> List[str]:
    available = set(categories)
    known = [c for c in CATEGORY_ORDER if c in available]
    extra = sorted(c for c in available if c not in CATEGORY_ORDER)
    return known + extra


def build_library_view(questions: List[Dict[str, Any]], expanded: Iterable[str] = ()) -> Dict[str, Any]:
    """Return the editor payload for ``questions`` (repository row dicts).

    Expanded keys naming categories that no longer exist are dropped from the
    echoed ``expanded`` list.
    """
    by_id = {int(q["id"]): q for q in questions}
    groups = group_items(
        Item(id=int(q["id"]), category=str(q["category"]), position=int(q["question_order"]))
        for q in questions
    )
    expanded_set = set(expanded)
    names = sorted_category_names(groups)
    categories = [
        {
            "category": name,
            "display_name": display_name(name),
            "count": len(groups[name]),
            "expanded": name in expanded_set,
            "questions": [by_id[item.id] for item in groups[name]],
        }
        for name in names
    ]
    return {
        "categories": categories,
        "expanded": [name for name in names if name in expanded_set],
        "total": len(questions),
    }


__all__ = [
    "CATEGORY_ORDER",
    "DISPLAY_NAMES",
    "display_name",
    "sorted_category_names",
    "build_library_view",
]
