import numpy

from tensorscan.helpers import template_def
from tensorscan.cluda import Snippet, dtypes
from tensorscan.cluda.kernel import render_template_source


#: The element type all scan kernels operate on.
SCAN_DTYPE = numpy.dtype('float32')


_DEFINITION = template_def(
    ['name', 'ctype', 'operation'],
    """
    ${ctype} ${name}(${ctype} v1, ${ctype} v2)
    {
        ${operation('v1', 'v2')}
    }
    """)


class Predicate:
    """
    An associative binary operation used by :py:class:`~tensorscan.algorithms.Scan`.
    Keeps the operation's kernel code, its host-side counterpart and its identity together.

    :param operation: a :py:class:`~tensorscan.cluda.Snippet` object with two parameters
        which will take the names of two arguments to join.
    :param empty: the empty value of the argument
        (the one which, being joined by another argument, does not change it).
    :param apply: a callable of two arguments with the same semantics as ``operation``,
        used by the host-side kernel functions.

    .. note::

        All the kernels operate on 32-bit floats, so ``empty`` is cast to ``float32``,
        and scans of logically integer or boolean data are only exact
        as long as the intermediate values are exactly representable.
    """

    def __init__(self, operation, empty, apply):
        self._operation = operation
        self._empty = dtypes.cast(SCAN_DTYPE)(empty)
        self._apply = apply

    @property
    def operation(self):
        return self._operation

    @property
    def empty(self):
        return self._empty

    def __call__(self, v1, v2):
        return self._apply(v1, v2)

    def definition(self, name, dtype=SCAN_DTYPE):
        """
        Returns the source of a function with the name ``name``
        taking two values of type ``dtype`` and returning their join.
        """
        return render_template_source(
            _DEFINITION, render_args=[name, dtypes.ctype(dtype), self._operation])


def predicate_sum():
    """
    Returns a :py:class:`~tensorscan.algorithms.Predicate` object which sums its arguments.
    """
    return Predicate(
        Snippet.create(lambda v1, v2: "return ${v1} + ${v2};"), 0, lambda v1, v2: v1 + v2)


def predicate_product():
    """
    Returns a :py:class:`~tensorscan.algorithms.Predicate` object
    which multiplies its arguments.
    """
    return Predicate(
        Snippet.create(lambda v1, v2: "return ${v1} * ${v2};"), 1, lambda v1, v2: v1 * v2)


def predicate_max():
    """
    Returns a :py:class:`~tensorscan.algorithms.Predicate` object
    which returns the largest of its arguments.
    """
    return Predicate(
        Snippet.create(lambda v1, v2: "return ${v1} > ${v2} ? ${v1} : ${v2};"),
        -numpy.inf, lambda v1, v2: v1 if v1 > v2 else v2)


def predicate_min():
    """
    Returns a :py:class:`~tensorscan.algorithms.Predicate` object
    which returns the smallest of its arguments.
    """
    return Predicate(
        Snippet.create(lambda v1, v2: "return ${v1} < ${v2} ? ${v1} : ${v2};"),
        numpy.inf, lambda v1, v2: v1 if v1 < v2 else v2)
