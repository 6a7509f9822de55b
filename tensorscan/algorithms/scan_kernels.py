"""
Kernels the scan is decomposed into.

Every kernel object exposes the names of the arrays it reads (``variable_names``),
the shape of the array it writes (``output_shape``),
the generated source with a single entry point ``kernel_main`` (``source``),
and the pure function ``element(coords, read)`` computing one output element,
which is what the reference backend maps over the output index space.
In the generated source inputs are read with ``load_<name>(coords...)``,
and the output element is written with ``store_output(value)``.
"""

import numbers

import tensorscan.helpers as helpers
from tensorscan.cluda import dtypes
from tensorscan.cluda.kernel import render_template
from tensorscan.core import ConfigurationError
from tensorscan.algorithms.indexing import AxisIndexer, COMPONENT_NAMES
from tensorscan.algorithms.predicates import SCAN_DTYPE

TEMPLATE = helpers.template_for(__file__)


def check_shape(shape):
    shape = helpers.wrap_in_tuple(shape)
    if any(not isinstance(length, numbers.Integral) or length < 1 for length in shape):
        raise ConfigurationError(
            "Array dimensions must be positive integers, got " + str(shape))
    return shape


def contracted_shape(shape, axis):
    """
    Returns ``shape`` with the length of ``axis`` halved (rounded down).
    """
    return helpers.replace_item(shape, axis, shape[axis] // 2)


class Kernel:
    """
    Base class for the scan kernels.
    The generated ``source`` and the host-side :py:meth:`element` describe the same
    per-element computation; :py:meth:`element` is the definitive one
    (it is what the reference backend runs), and ``source`` must be kept in step with it.
    """

    name = None
    variable_names = ()

    def __init__(self, output_shape):
        self.output_shape = tuple(output_shape)
        self.dtype = SCAN_DTYPE
        self.source = None

    def _render(self, def_name, *args):
        self.source = render_template(TEMPLATE.get_def(def_name), *args)

    def element(self, coords, read):
        """
        Returns the output value at ``coords``;
        ``read(name, coords)`` returns the value of the input ``name`` at ``coords``.
        """
        raise NotImplementedError


class SequentialScanKernel(Kernel):
    """
    Scans every output element independently, by folding the operation
    over all the preceding positions along the axis (including the current one
    if ``exclusive`` is ``False``).
    The work per output element is proportional to the axis length.

    :param shape: the shape of the input and the output.
    :param axis: the scanned axis (must be the innermost one).
    :param predicate: a :py:class:`~tensorscan.algorithms.Predicate` object.
    :param exclusive: whether to perform an exclusive scan.
    """

    name = 'scan_sequential'
    variable_names = ('x',)

    def __init__(self, shape, axis, predicate, exclusive):
        shape = check_shape(shape)
        Kernel.__init__(self, shape)
        self._indexer = AxisIndexer(len(shape), axis)
        self._predicate = predicate
        self._exclusive = exclusive
        self._render(
            'sequential', self._indexer, predicate,
            dtypes.c_constant(predicate.empty, SCAN_DTYPE), shape[axis], exclusive)

    def element(self, coords, read):
        indexer = self._indexer
        end = indexer.get_axis(coords) + (0 if self._exclusive else 1)
        val = self._predicate.empty
        for idx in range(end):
            val = self._predicate(val, read('x', indexer.with_axis(coords, idx)))
        return val


class ContractKernel(Kernel):
    """
    Joins pairs of adjacent elements along the axis, halving its length
    (if the length is odd, the last element is not used).

    :param shape: the shape of the input.
    :param axis: the contracted axis (must be the innermost one).
    :param predicate: a :py:class:`~tensorscan.algorithms.Predicate` object.
    """

    name = 'scan_contract'
    variable_names = ('x',)

    def __init__(self, shape, axis, predicate):
        shape = check_shape(shape)
        self._indexer = AxisIndexer(len(shape), axis)
        if shape[axis] < 2:
            raise ConfigurationError(
                "Cannot contract an axis of length " + str(shape[axis]))

        Kernel.__init__(self, contracted_shape(shape, axis))
        self._predicate = predicate
        self._render('contract', self._indexer, predicate)

    def element(self, coords, read):
        indexer = self._indexer
        pos = indexer.get_axis(coords) * 2
        x = read('x', indexer.with_axis(coords, pos))
        y = read('x', indexer.with_axis(coords, pos + 1))
        return self._predicate(x, y)


class MergeKernel(Kernel):
    """
    Reconstructs the scan of an array from the exclusive scan of its contracted version.
    Even positions take the scanned value of their pair directly,
    odd positions join it with the even element of the pair.
    For an inclusive scan, the element at the position itself is joined in addition.

    :param shape_x: the shape of the original array (and of the output).
    :param shape_r: the shape of the scanned contracted array.
    :param axis: the scanned axis (must be the innermost one).
    :param predicate: a :py:class:`~tensorscan.algorithms.Predicate` object.
    :param exclusive: whether the output is an exclusive scan.
    """

    name = 'scan_merge'
    variable_names = ('x', 'r')

    def __init__(self, shape_x, shape_r, axis, predicate, exclusive=True):
        shape_x = check_shape(shape_x)
        shape_r = check_shape(shape_r)
        if len(shape_x) != len(shape_r):
            raise ConfigurationError("Arrays must have the same rank")
        self._indexer = AxisIndexer(len(shape_x), axis)
        if shape_x[axis] % 2 == 1:
            raise ConfigurationError(
                "Cannot merge into an axis of odd length " + str(shape_x[axis]))
        if contracted_shape(shape_x, axis) != shape_r:
            raise ConfigurationError(
                "Size of the contracted axis must be half the size of the input axis, got " +
                str(shape_r) + " for the input of shape " + str(shape_x))

        Kernel.__init__(self, shape_x)
        self._predicate = predicate
        self._exclusive = exclusive
        self._render('merge', self._indexer, predicate, exclusive)

    def element(self, coords, read):
        indexer = self._indexer
        pos = indexer.get_axis(coords)
        val = read('r', indexer.with_axis(coords, pos // 2))
        if pos % 2 == 1:
            val = self._predicate(val, read('x', indexer.with_axis(coords, pos - 1)))
        if not self._exclusive:
            val = self._predicate(val, read('x', coords))
        return val


class TransposeKernel(Kernel):
    """
    Permutes the axes of an array, with the same semantics as ``numpy.transpose()``.

    :param shape: the shape of the input.
    :param axes: a permutation of ``range(len(shape))``.
    """

    name = 'transpose'
    variable_names = ('x',)

    def __init__(self, shape, axes):
        shape = check_shape(shape)
        rank = len(shape)
        if rank < 2 or rank > len(COMPONENT_NAMES):
            raise ConfigurationError("Transposition for rank " + str(rank) + " is not supported")
        axes = tuple(axes)
        if sorted(axes) != list(range(rank)):
            raise ConfigurationError(str(axes) + " is not a permutation of the array axes")

        Kernel.__init__(self, tuple(shape[axis] for axis in axes))
        # the output coordinate component which each input component is taken from
        self._positions = tuple(axes.index(axis) for axis in range(rank))
        self._render(
            'transpose', 'int' + str(rank),
            [COMPONENT_NAMES[position] for position in self._positions])

    def element(self, coords, read):
        return read('x', tuple(coords[position] for position in self._positions))
