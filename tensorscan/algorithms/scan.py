import logging
from collections import namedtuple

import numpy

import tensorscan.helpers as helpers
from tensorscan.core import Computation, Parameter, Annotation, Type, ConfigurationError
from tensorscan.algorithms.indexing import SCAN_AXIS_COMPONENTS
from tensorscan.algorithms.predicates import SCAN_DTYPE
from tensorscan.algorithms.scan_kernels import (
    SequentialScanKernel, ContractKernel, MergeKernel, TransposeKernel, check_shape)


logger = logging.getLogger(__name__)


class ScanDescriptor(namedtuple('ScanDescriptor', ['shape', 'axis', 'predicate', 'exclusive'])):
    """
    Fully determines a single scan:
    the array shape, the (non-negative) scanned axis, the predicate, and the scan type.
    """
    __slots__ = ()

    @property
    def inclusive(self):
        return not self.exclusive

    @property
    def identity(self):
        return self.predicate.empty

    @property
    def axis_length(self):
        return self.shape[self.axis]


class Scan(Computation):
    """
    Bases: :py:class:`~tensorscan.core.Computation`

    Scans the array over the given axis using the given binary operation.
    Namely, from an array ``[a, b, c, d, ...]`` and an operation ``.``,
    produces ``[a, a.b, a.b.c, a.b.c.d, ...]`` if ``exclusive`` is ``False``
    and ``[0, a, a.b, a.b.c, ...]`` if ``exclusive`` is ``True``
    (here ``0`` is the operation's identity element).

    If the axis is short (or has odd length), every output element is scanned sequentially
    in a single kernel.
    Otherwise adjacent pairs are joined, the resulting half-length array is scanned
    recursively, and the result is merged back to full length,
    which takes a number of kernel dispatches logarithmic in the axis length.

    :param arr_t: an array-like defining the initial array (of rank 1 to 4).
    :param predicate: a :py:class:`~tensorscan.algorithms.Predicate` object.
    :param axis: the axis to scan over.
    :param exclusive: whether to perform an exclusive scan (see above).
    :param sequential_threshold: the axis length starting from which the pairwise
        contraction is used for even-length axes.
        If not given, the ``max_sequential_scan`` device parameter is used.

    .. note::

        The computation operates on ``float32`` arrays regardless of the data it represents,
        so integer and boolean scans are exact only while intermediate values
        are exactly representable.

    .. py:method:: compiled_signature(output:o, input:i)

        :param input: a ``float32`` array with the shape of ``arr_t``.
        :param output: a ``float32`` array with the shape of ``arr_t``.
    """

    def __init__(self, arr_t, predicate, axis=-1, exclusive=False, sequential_threshold=None):

        shape = helpers.wrap_in_tuple(arr_t.shape)
        ndim = len(shape)
        if ndim not in SCAN_AXIS_COMPONENTS:
            raise ConfigurationError("Scan for rank " + str(ndim) + " is not supported")

        try:
            axis = helpers.normalize_axis(ndim, axis)
        except IndexError as exc:
            raise ConfigurationError(
                "Can't scan on axis " + str(axis) + " of a " + str(ndim) + "-dimensional array"
                ) from exc

        if shape[axis] == 0:
            raise ConfigurationError("Cannot scan over an empty axis")
        shape = check_shape(shape)

        if sequential_threshold is not None and sequential_threshold < 2:
            raise ConfigurationError(
                "Sequential threshold must be at least 2, got " + str(sequential_threshold))

        self._descriptor = ScanDescriptor(shape, axis, predicate, exclusive)
        self._sequential_threshold = sequential_threshold

        if not helpers.are_axes_innermost(ndim, (axis,)):
            self._transpose_to, self._transpose_from = (
                helpers.make_axes_innermost(ndim, (axis,)))
        else:
            self._transpose_to = None
            self._transpose_from = None

        arr_t = Type(SCAN_DTYPE, shape=shape)
        Computation.__init__(self, [
            Parameter('output', Annotation(arr_t, 'o')),
            Parameter('input', Annotation(arr_t, 'i'))])

    @property
    def descriptor(self):
        return self._descriptor

    def _build_plan(self, plan_factory, device_params, args):
        plan = plan_factory()
        desc = self._descriptor

        if self._transpose_to is not None:

            transpose_to = TransposeKernel(desc.shape, self._transpose_to)
            transposed = plan.temp_array(transpose_to.output_shape, SCAN_DTYPE)

            sub_scan = Scan(
                transposed, desc.predicate, exclusive=desc.exclusive,
                sequential_threshold=self._sequential_threshold)
            transposed_scanned = plan.temp_array_like(transposed)

            transpose_from = TransposeKernel(transposed.shape, self._transpose_from)

            plan.kernel_call(transpose_to, [transposed, args.input])
            plan.computation_call(sub_scan, transposed_scanned, transposed)
            plan.kernel_call(transpose_from, [args.output, transposed_scanned])

            return plan

        if self._sequential_threshold is None:
            threshold = device_params.max_sequential_scan
        else:
            threshold = self._sequential_threshold

        length = desc.axis_length

        if length % 2 == 1 or length < threshold:
            logger.debug(
                "Scanning %s over axis %d sequentially (threshold %d)",
                desc.shape, desc.axis, threshold)

            sequential = SequentialScanKernel(
                desc.shape, desc.axis, desc.predicate, desc.exclusive)
            plan.kernel_call(sequential, [args.output, args.input])

        else:
            logger.debug(
                "Scanning %s over axis %d by contraction (threshold %d)",
                desc.shape, desc.axis, threshold)

            contract = ContractKernel(desc.shape, desc.axis, desc.predicate)
            contracted = plan.temp_array(contract.output_shape, SCAN_DTYPE)

            # The merge needs an exclusive scan of the pairs regardless of the final scan type
            sub_scan = Scan(
                contracted, desc.predicate, axis=desc.axis, exclusive=True,
                sequential_threshold=self._sequential_threshold)
            scanned = plan.temp_array_like(contracted)

            merge = MergeKernel(
                desc.shape, scanned.shape, desc.axis, desc.predicate, exclusive=desc.exclusive)

            plan.kernel_call(contract, [contracted, args.input])
            plan.computation_call(sub_scan, scanned, contracted)
            plan.kernel_call(merge, [args.output, args.input, scanned])

        return plan


def scan(thr, arr, predicate, axis=-1, exclusive=False, sequential_threshold=None):
    """
    Scans ``arr`` with :py:class:`Scan` on the thread ``thr``
    and returns the resulting device array.
    ``arr`` can be a device array or anything ``numpy.asarray()`` accepts;
    it is converted to ``float32`` if necessary.
    The rest of the parameters are passed to :py:class:`Scan`.

    .. note::

        As in :py:class:`Scan`, the scan is inclusive by default;
        pass ``exclusive=True`` for the exclusive variant
        (the default of some other scan interfaces, e.g. ``tf.scan`` in TensorFlow.js).
    """
    if not hasattr(arr, 'get'):
        arr = thr.to_device(numpy.asarray(arr, SCAN_DTYPE))
    elif arr.dtype != SCAN_DTYPE:
        arr = thr.to_device(arr.get().astype(SCAN_DTYPE))

    scanc = Scan(
        arr, predicate, axis=axis, exclusive=exclusive,
        sequential_threshold=sequential_threshold).compile(thr)

    output = thr.empty_like(arr)
    scanc(output, arr)
    return output
