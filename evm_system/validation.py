"""
Input checks shared by ``average``, ``evm`` and ``evm_asymmetric``.

Validation is all-or-nothing and runs before any numeric work. Checks run
in a fixed order and the first violated one is reported:

    1. every array is one-dimensional and all have the same length
    2. at least one measurement
    3. every error value is strictly positive
    4. no NaN in any array
"""

import logging

import numpy as np


logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """
    Raised for malformed measurement input.

    ``reason`` is one of ``"shape"``, ``"length_mismatch"``, ``"empty"``,
    ``"non_positive_error"`` or ``"nan_value"``.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


def _fail(reason, message):
    logger.debug("Rejected input (%s): %s", reason, message)
    raise InvalidInputError(reason, message)


def validate_measurements(values, *errors, names=None):
    """
    Check and coerce a value array and one or more error arrays.

    Parameters
    ----------
    values : array-like
        Measured values.
    *errors : array-like
        One (symmetric) or two (lower, upper) uncertainty arrays.
    names : sequence of str, optional
        Labels of the error arrays used in messages.

    Returns
    -------
    tuple of np.ndarray
        ``(values, *errors)`` as 1-D float arrays.
    """
    if names is None:
        names = ["errors"] if len(errors) == 1 else [f"errors[{k}]" for k in range(len(errors))]
    labels = ["values"] + list(names)

    arrays = []
    for label, arr in zip(labels, (values,) + errors):
        try:
            arr = np.asarray(arr, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError("shape", f"'{label}' is not a numeric array: {exc}") from exc
        if arr.ndim != 1:
            _fail("shape", f"'{label}' must be one-dimensional, got shape {arr.shape}.")
        arrays.append(arr)

    n = len(arrays[0])
    for label, arr in zip(labels[1:], arrays[1:]):
        if len(arr) != n:
            _fail("length_mismatch",
                  f"'values' has {n} entries but '{label}' has {len(arr)}.")

    if n == 0:
        _fail("empty", "At least one measurement is required.")

    # NaN compares False here, so it falls through to the NaN check
    for label, arr in zip(labels[1:], arrays[1:]):
        bad = np.flatnonzero(arr <= 0)
        if bad.size:
            i = int(bad[0])
            _fail("non_positive_error",
                  f"'{label}' must be strictly positive; entry {i} is {arr[i]!r}.")

    for label, arr in zip(labels, arrays):
        bad = np.flatnonzero(np.isnan(arr))
        if bad.size:
            _fail("nan_value", f"'{label}' contains NaN at entry {int(bad[0])}.")

    return tuple(arrays)
