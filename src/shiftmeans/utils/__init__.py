"""Utility functions for shiftmeans engines."""

from .convergence import (
    ChangeInAssignments,
    ShiftTolerance
)

from .metrics import (
    squared_distances,
    total_sum_of_squares,
    within_sum_of_squares,
    inertia
)

from .validation import (
    as_data_source,
    validate_data,
    check_n_clusters,
    check_positive,
    check_max_iter,
    check_random_state
)

__all__ = [
    # Convergence criteria
    'ChangeInAssignments',
    'ShiftTolerance',
    
    # Metrics
    'squared_distances',
    'total_sum_of_squares',
    'within_sum_of_squares',
    'inertia',
    
    # Validation
    'as_data_source',
    'validate_data',
    'check_n_clusters',
    'check_positive',
    'check_max_iter',
    'check_random_state'
]
