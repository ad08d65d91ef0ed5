"""Utility functions for clusterfetch engines."""

from .convergence import MembershipUnchanged

from .metrics import (
    prefetch_predictions,
    owner_lookup,
    evaluate_prefetch,
    threshold_sweep
)

from .validation import (
    validate_data,
    check_int,
    check_positive_int,
    check_threshold,
    check_random_state
)

from .device import (
    available_devices,
    get_default_device,
    parse_device
)

from .io import load_vectors

__all__ = [
    # Convergence criteria
    'MembershipUnchanged',

    # Metrics
    'prefetch_predictions',
    'owner_lookup',
    'evaluate_prefetch',
    'threshold_sweep',

    # Validation
    'validate_data',
    'check_int',
    'check_positive_int',
    'check_threshold',
    'check_random_state',

    # Device management
    'available_devices',
    'get_default_device',
    'parse_device',

    # Files
    'load_vectors'
]
