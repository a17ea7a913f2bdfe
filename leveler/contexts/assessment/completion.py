"""
Category completion tracking.

A category is complete when it has at least one core area and every core area
has a recorded selection.
"""

from leveler.contexts.assessment.assessment_data_structure import Selections
from leveler.contexts.definition import Category


def evaluate_completion(categories: list[Category], selections: Selections) -> set[int]:
    """
    Compute which categories are fully answered.

    Args:
        categories: Parsed ladder categories
        selections: category title -> competency name -> selected level

    Returns:
        Indices (into categories) of complete categories
    """
    completed = set()

    for index, category in enumerate(categories):
        if not category.core_areas:
            continue
        category_selections = selections.get(category.title, {})
        if all(core_area.name in category_selections for core_area in category.core_areas):
            completed.add(index)

    return completed


def completion_progress(categories: list[Category], selections: Selections) -> tuple[int, int]:
    """Count answered core areas against the total across all categories."""
    answered = 0
    total = 0
    for category in categories:
        category_selections = selections.get(category.title, {})
        for core_area in category.core_areas:
            total += 1
            if core_area.name in category_selections:
                answered += 1
    return answered, total
