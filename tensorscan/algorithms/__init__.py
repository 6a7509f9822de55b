"""
Scan algorithms.


Scan
^^^^

.. autoclass:: Scan
    :members:

.. autofunction:: scan

.. autoclass:: ScanDescriptor
    :members:


Predicates
^^^^^^^^^^

.. autoclass:: Predicate
    :members:

.. autofunction:: predicate_sum

.. autofunction:: predicate_product

.. autofunction:: predicate_max

.. autofunction:: predicate_min


Kernels
^^^^^^^

.. autoclass:: AxisIndexer
    :members:

.. autoclass:: SequentialScanKernel

.. autoclass:: ContractKernel

.. autoclass:: MergeKernel

.. autoclass:: TransposeKernel
"""

from tensorscan.algorithms.predicates import (
    SCAN_DTYPE, Predicate, predicate_sum, predicate_product, predicate_max, predicate_min)
from tensorscan.algorithms.indexing import AxisIndexer
from tensorscan.algorithms.scan_kernels import (
    SequentialScanKernel, ContractKernel, MergeKernel, TransposeKernel)
from tensorscan.algorithms.scan import ScanDescriptor, Scan, scan
