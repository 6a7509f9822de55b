"""
Reference dispatch backend.

A kernel dispatch is modelled as a parallel map of the kernel's pure
per-coordinate function over the output index space.
Every invocation reads only the kernel's declared inputs and produces exactly one
output element; the order in which coordinates are visited is unspecified
(and is randomized if the thread was created with ``shuffle=True``).
"""

import numpy

from tensorscan.helpers import wrap_in_tuple
from tensorscan.cluda import dtypes


def get_id():
    return 'reference'


class DeviceParameters:
    """
    An assembly of device parameters used by computations to choose their algorithms.

    .. py:attribute:: api_id

        Identifier of the API this device belongs to.

    .. py:attribute:: max_sequential_scan

        The maximum scan axis length for which scanning every output element
        sequentially is considered cheaper than the contract-and-merge cascade.
    """

    def __init__(self, max_sequential_scan=16):
        self.api_id = get_id()
        self.max_sequential_scan = max_sequential_scan


class Array:
    """
    A device array of the reference backend.

    .. py:attribute:: shape

    .. py:attribute:: dtype

    .. py:attribute:: base_data

        The memory buffer where the array is located (a ``numpy.ndarray``).

    .. py:attribute:: thread

        The :py:class:`Thread` object for which the array was created.
    """

    def __init__(self, thread, shape, dtype):
        self.thread = thread
        self.base_data = numpy.empty(wrap_in_tuple(shape), dtypes.normalize_type(dtype))

    @property
    def shape(self):
        return self.base_data.shape

    @property
    def dtype(self):
        return self.base_data.dtype

    def get(self):
        """
        Returns ``numpy.ndarray`` with the contents of the array.
        """
        return self.base_data.copy()


class Thread:
    """
    Executes kernels for the reference backend.

    :param max_sequential_scan: see :py:class:`DeviceParameters`.
    :param shuffle: if ``True``, output coordinates in every dispatch
        are visited in a random order.
    :param seed: the seed for the shuffling random number generator.
    """

    def __init__(self, max_sequential_scan=16, shuffle=False, seed=None):
        self.device_params = DeviceParameters(max_sequential_scan=max_sequential_scan)
        self._shuffle = shuffle
        self._rng = numpy.random.default_rng(seed)
        self.dispatch_count = 0

    @classmethod
    def create(cls, **kwds):
        """
        Creates a new ``Thread`` object (same as the constructor, kept for symmetry with
        the way threads are obtained from API modules).
        """
        return cls(**kwds)

    def array(self, shape, dtype):
        """
        Creates an uninitialized :py:class:`Array` object.
        """
        return Array(self, shape, dtype)

    def empty_like(self, arr):
        """
        Allocates an array on the device with the same shape and dtype as ``arr``.
        """
        return self.array(arr.shape, arr.dtype)

    def to_device(self, arr, dest=None):
        """
        Copies an array to the device memory.
        If ``dest`` is specified, it is used as the destination,
        and the method returns ``None``.
        Otherwise the destination array is created internally and returned from the method.
        """
        arr = numpy.asarray(arr)
        if dest is None:
            result = self.array(arr.shape, arr.dtype)
            result.base_data[...] = arr
            return result
        else:
            dest.base_data[...] = arr

    def from_device(self, arr):
        """
        Transfers the contents of ``arr`` to a ``numpy.ndarray`` object.
        """
        return arr.get()

    def _coordinates(self, shape):
        coords = list(numpy.ndindex(*shape))
        if self._shuffle:
            order = self._rng.permutation(len(coords))
            coords = [coords[i] for i in order]
        return coords

    def parallel_map(self, kernel, output, inputs):
        """
        Dispatches ``kernel``: evaluates ``kernel.element(coords, read)``
        for every coordinate of ``kernel.output_shape`` and stores the result in ``output``.

        :param kernel: a kernel object.
        :param output: an :py:class:`Array` of shape ``kernel.output_shape``.
        :param inputs: a dictionary ``{name: Array}``
            with a value for each of ``kernel.variable_names``.
        """
        if set(inputs) != set(kernel.variable_names):
            raise ValueError(
                "Kernel " + kernel.name + " reads " + str(list(kernel.variable_names)) +
                ", got " + str(sorted(inputs)))
        if tuple(output.shape) != tuple(kernel.output_shape):
            raise ValueError(
                "Kernel " + kernel.name + " writes an array of shape " +
                str(tuple(kernel.output_shape)) + ", got " + str(tuple(output.shape)))

        buffers = {name: arr.base_data for name, arr in inputs.items()}

        def read(name, coords):
            return buffers[name][coords]

        # Outputs are written only after the whole index space is evaluated.
        results = [
            (coords, kernel.element(coords, read))
            for coords in self._coordinates(kernel.output_shape)]
        dest = output.base_data
        for coords, val in results:
            dest[coords] = val

        self.dispatch_count += 1
