"""
Legend manager module for ArcheoMap.

Builds the (name, color) legend entries shown next to the map. Legends
follow the current selection in its given order; selected values that are
not currently visible are kept, since the legend reflects what the user
asked to see.
"""

from .color_system import categorical_color, token_match_color


def build_categorical_legend(selected_values, ramp):
    """
    Create legend entries for a categorical selection.

    Args:
        selected_values: ordered sequence of selected labels
        ramp: ColorRamp or ramp name

    Returns:
        list: (name, hex color) tuples in selection order
    """
    selected_values = list(selected_values)
    return [
        (value, categorical_color(value, selected_values, ramp))
        for value in selected_values
    ]


def build_culture_legend(culture_filter, ramp):
    return build_categorical_legend(culture_filter.selected, ramp)


def build_haplogroup_legend(haplogroup_filter, ramp):
    """Legend for a Y-haplogroup or mtDNA selection."""
    return build_categorical_legend(haplogroup_filter.selected, ramp)


def build_y_haplotree_legend(y_haplotree_filter, ramp):
    """
    Create legend entries for Y-haplotree terms.

    Each term is colored the way a path containing it would be, so a term
    repeated later in the list shares the color of its first occurrence.
    """
    terms = list(y_haplotree_filter.terms)
    return [(term, token_match_color(term, terms, ramp)) for term in terms]
