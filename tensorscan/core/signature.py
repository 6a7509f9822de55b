import inspect

import numpy

from tensorscan.helpers import wrap_in_tuple
from tensorscan.cluda import dtypes


class Type:
    """
    Represents an array type of a computation parameter.

    .. py:attribute:: shape

        A tuple of integers.

    .. py:attribute:: dtype

        A ``numpy.dtype`` instance.

    .. py:attribute:: ctype

        A string with the name of C type corresponding to :py:attr:`dtype`.
    """

    def __init__(self, dtype, shape=None):
        self.shape = wrap_in_tuple(shape)
        self.dtype = dtypes.normalize_type(dtype)
        self.ctype = dtypes.ctype(self.dtype)

    def compatible_with(self, other):
        return self.dtype == other.dtype and self.shape == other.shape

    def __eq__(self, other):
        return isinstance(other, Type) and self.compatible_with(other)

    @classmethod
    def from_value(cls, val):
        """
        Creates a :py:class:`Type` object corresponding to the given value
        (anything with ``shape`` and ``dtype`` attributes).
        """
        if isinstance(val, Type):
            # Creating a new object, because ``val`` may be some derivative of Type,
            # used as a syntactic sugar, and we do not want it to confuse us later.
            return cls(val.dtype, shape=val.shape)
        elif hasattr(val, 'dtype') and hasattr(val, 'shape'):
            return cls(val.dtype, shape=val.shape)
        else:
            raise TypeError("Cannot derive an array type from " + repr(val))

    def __repr__(self):
        return "Type({dtype}, shape={shape})".format(dtype=self.dtype, shape=self.shape)


class Annotation:
    """
    Computation parameter annotation,
    in the same sense as it is used for functions in the standard library.

    :param type_: a :py:class:`~tensorscan.core.Type` object or an array-like.
    :param role: any of ``'i'`` (input), ``'o'`` (output), ``'io'`` (input/output).
    """

    def __init__(self, type_, role='io'):
        self.type = Type.from_value(type_)

        if role not in ('i', 'o', 'io'):
            raise ValueError("Invalid role: " + str(role))
        self.input = 'i' in role
        self.output = 'o' in role

    def __repr__(self):
        role = ("i" if self.input else "") + ("o" if self.output else "")
        return "Annotation({type_}, role={role})".format(type_=self.type, role=role)


class Parameter(inspect.Parameter):
    """
    Computation parameter,
    in the same sense as it is used for functions in the standard library.
    In its terms, all computation parameters have kind ``POSITIONAL_OR_KEYWORD``.

    :param name: parameter name.
    :param annotation: an :py:class:`~tensorscan.core.Annotation` object.
    """

    def __init__(self, name, annotation):
        inspect.Parameter.__init__(
            self, name, annotation=annotation, kind=inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Signature(inspect.Signature):
    """
    Computation signature,
    in the same sense as it is used for functions in the standard library.

    :param parameters: a list of :py:class:`~tensorscan.core.Parameter` objects.

    .. py:attribute:: parameters

        An ``OrderedDict`` with :py:class:`~tensorscan.core.Parameter` objects
        indexed by their names.
    """

    def __init__(self, parameters):
        inspect.Signature.__init__(self, parameters)

    def bind_arrays(self, args, kwds):
        """
        Binds passed positional and keyword arguments to parameters in the signature,
        checks that each of them has the annotated shape and dtype,
        and returns a dictionary ``{name: value}``.
        """
        bound_args = self.bind(*args, **kwds)
        for name, value in bound_args.arguments.items():
            expected = self.parameters[name].annotation.type
            if tuple(value.shape) != expected.shape:
                raise ValueError(
                    "Expected an array of shape " + str(expected.shape) +
                    " for '" + name + "', got " + str(tuple(value.shape)))
            if value.dtype != expected.dtype:
                raise ValueError(
                    "Expected an array of dtype " + str(expected.dtype) +
                    " for '" + name + "', got " + str(value.dtype))
        return dict(bound_args.arguments)
