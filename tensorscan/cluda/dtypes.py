import platform

import numpy


_DTYPE_TO_BUILTIN_CTYPE = {}


def normalize_type(dtype):
    """
    Function for wrapping all dtypes coming from the user.
    ``numpy`` uses two different classes to represent dtypes,
    and one of them does not have some important attributes.
    """
    return numpy.dtype(dtype)

def is_double(dtype):
    """
    Returns ``True`` if ``dtype`` is double precision floating point.
    """
    dtype = normalize_type(dtype)
    return numpy.issubdtype(dtype, numpy.float64)

def is_integer(dtype):
    """
    Returns ``True`` if ``dtype`` is an integer.
    """
    dtype = normalize_type(dtype)
    return numpy.issubdtype(dtype, numpy.integer)

def cast(dtype):
    """
    Returns function that takes one argument and casts it to ``dtype``.
    """
    dtype = normalize_type(dtype)
    def _cast(val):
        if not hasattr(val, 'dtype'):
            # A non-numpy scalar
            return numpy.array([val], dtype)[0]
        elif val.dtype != dtype:
            return val.astype(dtype)
        else:
            return val
    return _cast

def c_constant(val, dtype=None):
    """
    Returns a C-style numerical constant.
    """
    if dtype is None:
        dtype = numpy.asarray(val).dtype
    else:
        dtype = normalize_type(dtype)

    val = cast(dtype)(val)

    if is_integer(dtype):
        if dtype.itemsize > 4:
            postfix = "L" if numpy.issubdtype(dtype, numpy.signedinteger) else "UL"
        else:
            postfix = ""
        return str(val) + postfix
    elif numpy.isnan(val):
        return "NAN"
    elif numpy.isinf(val):
        return ("-" if val < 0 else "") + "INFINITY"
    else:
        return repr(float(val)) + ("f" if dtype.itemsize <= 4 else "")

def _register_dtype(dtype, ctype_str):
    dtype = normalize_type(dtype)
    _DTYPE_TO_BUILTIN_CTYPE[dtype] = ctype_str

# Taken from compyte.dtypes
def _fill_dtype_registry(respect_windows=True):

    _register_dtype(numpy.bool_, "bool")
    _register_dtype(numpy.int8, "char")
    _register_dtype(numpy.uint8, "unsigned char")
    _register_dtype(numpy.int16, "short")
    _register_dtype(numpy.uint16, "unsigned short")
    _register_dtype(numpy.int32, "int")
    _register_dtype(numpy.uint32, "unsigned int")

    if platform.system() == 'Windows' and respect_windows:
        i64_name = "long long"
    else:
        i64_name = "long"

    _register_dtype(numpy.int64, i64_name)
    _register_dtype(numpy.uint64, "unsigned %s" % i64_name)

    _register_dtype(numpy.float32, "float")
    _register_dtype(numpy.float64, "double")

_fill_dtype_registry()


def ctype(dtype):
    """
    For a built-in C type, returns a string with the name of the type.
    """
    return _DTYPE_TO_BUILTIN_CTYPE[normalize_type(dtype)]
