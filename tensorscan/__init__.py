"""
Parallel prefix scans over N-dimensional arrays,
expressed as synchronization-free per-element kernel dispatches.
"""

VERSION = (0, 1, 0)
__version__ = '.'.join(str(x) for x in VERSION)
