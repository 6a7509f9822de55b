from tensorscan.helpers import replace_item
from tensorscan.core import ConfigurationError


# Coordinate component addressing the scanned axis, by rank.
# Rank 1 coordinates are scalars and are addressed directly.
SCAN_AXIS_COMPONENTS = {1: None, 2: 1, 3: 2, 4: 3}

COMPONENT_NAMES = ('x', 'y', 'z', 'w')


class AxisIndexer:
    """
    Index arithmetic shared by the scan kernels.
    The scanned axis of a rank ``r`` array is always addressed by the coordinate
    component assigned to ``r`` in a fixed table (the innermost one),
    so the axis must be moved innermost before the kernels are created.

    :param rank: the array rank, from 1 to 4.
    :param axis: the scanned axis, must be the innermost one.
    """

    def __init__(self, rank, axis):
        if rank not in SCAN_AXIS_COMPONENTS:
            raise ConfigurationError("Scan for rank " + str(rank) + " is not supported")
        if axis < 0 or axis >= rank:
            raise ConfigurationError(
                "Can't scan on axis " + str(axis) + " of a " + str(rank) + "-dimensional array")

        component = SCAN_AXIS_COMPONENTS[rank]
        expected_axis = 0 if component is None else component
        if axis != expected_axis:
            raise ConfigurationError(
                "Scan kernels for a " + str(rank) + "-dimensional array address axis " +
                str(expected_axis) + ", got " + str(axis))

        self.rank = rank
        self.axis = axis
        self._component = component

    @property
    def coords_ctype(self):
        return 'int' if self.rank == 1 else 'int' + str(self.rank)

    def axis_coord(self, name):
        """
        Returns the source expression for the axis component of the coordinate ``name``.
        """
        if self._component is None:
            return name
        return name + '.' + COMPONENT_NAMES[self._component]

    def coords(self, name):
        """
        Returns the source for the list of components of the coordinate ``name``,
        as expected by the read primitives.
        """
        if self._component is None:
            return name
        return ", ".join(name + '.' + COMPONENT_NAMES[i] for i in range(self.rank))

    def get_axis(self, coords):
        return coords[self.axis]

    def with_axis(self, coords, value):
        """
        Returns a copy of the coordinate tuple ``coords``
        with the axis component set to ``value``.
        """
        return replace_item(coords, self.axis, value)
