import pytest

from tensorscan.core import ConfigurationError
from tensorscan.algorithms import AxisIndexer


@pytest.mark.parametrize(('rank', 'axis', 'ctype', 'axis_coord', 'coords'), [
    (1, 0, 'int', 'c', 'c'),
    (2, 1, 'int2', 'c.y', 'c.x, c.y'),
    (3, 2, 'int3', 'c.z', 'c.x, c.y, c.z'),
    (4, 3, 'int4', 'c.w', 'c.x, c.y, c.z, c.w'),
    ], ids=["rank1", "rank2", "rank3", "rank4"])
def test_source_expressions(rank, axis, ctype, axis_coord, coords):
    indexer = AxisIndexer(rank, axis)
    assert indexer.coords_ctype == ctype
    assert indexer.axis_coord('c') == axis_coord
    assert indexer.coords('c') == coords


def test_host_coordinates():
    indexer = AxisIndexer(3, 2)
    assert indexer.get_axis((4, 5, 6)) == 6
    assert indexer.with_axis((4, 5, 6), 0) == (4, 5, 0)

    indexer = AxisIndexer(1, 0)
    assert indexer.with_axis((7,), 3) == (3,)


@pytest.mark.parametrize(('rank', 'axis'), [
    (0, 0), (5, 4),     # unsupported ranks
    (2, 2), (3, -1),    # out of range
    (2, 0), (4, 1),     # not the innermost axis
    ])
def test_errors(rank, axis):
    with pytest.raises(ConfigurationError):
        AxisIndexer(rank, axis)
