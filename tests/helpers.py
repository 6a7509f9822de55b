import numpy

from tensorscan.helpers import wrap_in_tuple
from tensorscan.cluda import dtypes


# Default tolerances for numpy.allclose().
# Should be enough to detect a error, but not enough to trigger a fail
# in case of a different order of operations in a floating point scan.
SINGLE_RTOL = 1e-5
SINGLE_ATOL = 1e-8

DOUBLE_RTOL = 1e-11
DOUBLE_ATOL = 1e-11


def get_test_array(shape, dtype, no_zeros=False, high=None, integer_valued=False):
    """
    Returns a random array.
    If ``integer_valued`` is ``True``, a floating point array is filled with small integers,
    so that sums and products of its elements are exact.
    """
    shape = wrap_in_tuple(shape)
    dtype = dtypes.normalize_type(dtype)
    rng = numpy.random.default_rng()

    if dtypes.is_integer(dtype) or integer_valued:
        low = 1 if no_zeros else 0
        if high is None:
            high = 100 # will work even with signed chars
        return rng.integers(low, high, shape).astype(dtype)
    else:
        low = 0.01 if no_zeros else 0
        if high is None:
            high = 1.0
        return rng.uniform(low, high, shape).astype(dtype)


def diff_is_negligible(m, m_ref, atol=None, rtol=None, verbose=True):

    assert m.dtype == m_ref.dtype

    if dtypes.is_integer(m.dtype):
        close = (m == m_ref)
    else:
        if atol is None:
            atol = DOUBLE_ATOL if dtypes.is_double(m.dtype) else SINGLE_ATOL
        if rtol is None:
            rtol = DOUBLE_RTOL if dtypes.is_double(m.dtype) else SINGLE_RTOL

        close = numpy.isclose(m, m_ref, atol=atol, rtol=rtol)

    if close.all():
        return True

    if verbose:
        far_idxs = numpy.vstack(numpy.where(~close)).T
        print(
            ("diff_is_negligible() with atol={atol} and rtol={rtol} " +
            "found {diffs} differences, first ones are:").format(
            atol=atol, rtol=rtol, diffs=str(far_idxs.shape[0])))
        for idx, _ in zip(far_idxs, range(10)):
            idx = tuple(idx)
            print("idx: {idx}, test: {test}, ref: {ref}".format(
                idx=idx, test=m[idx], ref=m_ref[idx]))

    return False
