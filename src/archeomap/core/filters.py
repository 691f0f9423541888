"""
Filter application logic for ArcheoMap samples.

Each apply_* function takes a sequence of samples and returns the matching
subset as a new list, preserving order. The single-sample predicates are
shared with the cascading-option computations in analysis.statistics.
"""

# =============================================================================
# Single-sample predicates
# =============================================================================

def normalized_bounds(date_min, date_max):
    """Return (date_min, date_max) with inverted bounds swapped."""
    if date_min is not None and date_max is not None and date_min > date_max:
        return date_max, date_min
    return date_min, date_max


def passes_date(sample, date_min, date_max, include_undated):
    """
    Check a sample against an inclusive age range.

    Undated samples pass only when include_undated is set; a None bound is
    unbounded on that side.
    """
    age = sample.age
    if age is None:
        return include_undated
    if date_min is not None and age < date_min:
        return False
    if date_max is not None and age > date_max:
        return False
    return True


def passes_selection(value, selected, include_no_value):
    """
    Check a categorical value against a selection.

    Args:
        value: the sample's value or None
        selected: set of selected values (empty = nothing selected)
        include_no_value: whether samples without a value pass

    Returns:
        bool: True if the value passes
    """
    if value is None:
        return include_no_value
    if not selected:
        return False
    return value in selected


def lowercase_terms(terms):
    return {t.strip().lower() for t in terms if t and t.strip()}


def passes_y_haplotree(sample, terms_lower):
    """
    Check a sample's haplotree path against lowercase terms.

    An empty term set passes everything. When terms are given, samples
    without a path never pass.
    """
    if not terms_lower:
        return True
    path = sample.y_haplotree
    if path is None:
        return False
    return any(node.strip().lower() in terms_lower for node in path.split('>'))


# =============================================================================
# Individual Filter Functions
# =============================================================================

def apply_date_filter(samples, date_min, date_max, include_undated):
    """
    Filter samples by date range.

    Args:
        samples: sequence of Sample
        date_min: lower bound in cal BP, or None
        date_max: upper bound in cal BP, or None
        include_undated: keep samples without an age

    Returns:
        list: samples with date_min <= age <= date_max, plus undated ones if requested
    """
    date_min, date_max = normalized_bounds(date_min, date_max)
    if date_min is None and date_max is None and include_undated:
        return list(samples)
    return [s for s in samples if passes_date(s, date_min, date_max, include_undated)]


def _apply_selection(samples, attribute, selected, include_no_value):
    selected = set(selected)
    if not selected and not include_no_value:
        # Nothing selected and no-value samples excluded: show nothing
        return []
    return [s for s in samples if passes_selection(getattr(s, attribute), selected, include_no_value)]


def apply_culture_filter(samples, culture_filter, include_no_culture):
    """Filter samples by culture selection."""
    return _apply_selection(samples, 'culture', culture_filter.selected, include_no_culture)


def apply_y_haplogroup_filter(samples, haplogroup_filter, include_no_y_haplogroup):
    """Filter samples by Y-haplogroup selection."""
    return _apply_selection(samples, 'y_haplogroup', haplogroup_filter.selected, include_no_y_haplogroup)


def apply_mtdna_filter(samples, mtdna_filter, include_no_mtdna):
    """Filter samples by mtDNA haplogroup selection."""
    return _apply_selection(samples, 'mtdna', mtdna_filter.selected, include_no_mtdna)


def apply_y_haplotree_filter(samples, y_haplotree_filter):
    """
    Filter samples by Y-haplotree token matching.

    A sample passes if ANY term equals ANY node of its path (split on '>',
    stripped, case-insensitive). Partial node matches do not count. With no
    terms every sample passes; otherwise samples without a path are dropped.
    """
    terms_lower = lowercase_terms(y_haplotree_filter.terms)
    if not terms_lower:
        return list(samples)
    return [s for s in samples if passes_y_haplotree(s, terms_lower)]


# =============================================================================
# Combined Filter Application
# =============================================================================

def apply_filters(samples, request):
    """
    Apply all filters from a FilterRequest.

    Order: date, culture, then either the Y-haplotree filter (when it has
    terms) or the Y-haplogroup filter, then mtDNA. The two Y filters are
    mutually exclusive; when haplotree terms are present the Y-haplogroup
    selection is ignored entirely.

    Args:
        samples: sequence of Sample
        request: FilterRequest

    Returns:
        list: matching samples in their original order
    """
    result = apply_date_filter(samples, request.date_min, request.date_max, request.include_undated)
    result = apply_culture_filter(result, request.culture_filter, request.include_no_culture)

    if request.y_haplotree_filter.active:
        result = apply_y_haplotree_filter(result, request.y_haplotree_filter)
    else:
        result = apply_y_haplogroup_filter(result, request.y_haplogroup_filter,
                                           request.include_no_y_haplogroup)

    result = apply_mtdna_filter(result, request.mtdna_filter, request.include_no_mtdna)
    return result
