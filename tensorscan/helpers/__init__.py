"""
This module contains various auxiliary functions which are used throughout the library.
"""

import collections.abc
import inspect
import os.path

from mako.template import Template


def make_template(template, filename=False):
    # Can't import submodules from tensorscan itself here, because it creates circular dependencies
    # (kernel modules have template_for() calls at the root level,
    # so they get activated on import).
    kwds = dict(
        strict_undefined=True,
        imports=['import numpy'])

    # Creating a template from a filename results in more comprehensible stack traces,
    # so we are taking advantage of this if possible.
    if filename:
        kwds['filename'] = template
        return Template(**kwds)
    else:
        return Template(template, **kwds)


def template_from(template):
    """
    Creates a Mako template object from a given string.
    If ``template`` already has ``render()`` method, does nothing.
    """
    if hasattr(template, 'render'):
        return template
    else:
        return make_template(template)


def extract_signature_and_value(func_or_str, default_parameters=None):
    """
    If ``func_or_str`` is a function, returns its signature and the value it returns
    when called with mock arguments.
    Otherwise returns a signature with ``default_parameters`` and ``func_or_str`` itself.
    """
    if not inspect.isfunction(func_or_str):
        if default_parameters is None:
            parameters = []
        else:
            kind = inspect.Parameter.POSITIONAL_OR_KEYWORD
            parameters = [inspect.Parameter(name, kind=kind) for name in default_parameters]

        return inspect.Signature(parameters), func_or_str

    signature = inspect.signature(func_or_str)

    # pass mock values to extract the value
    args = [None] * len(signature.parameters)
    return signature, func_or_str(*args)


def template_def(signature, code):
    """
    Returns a ``Mako`` template with the given ``signature``.

    :param signature: a list of postitional argument names,
        or a ``Signature`` object from ``inspect`` module.
    :code: a body of the template.
    """
    if not isinstance(signature, inspect.Signature):
        # treating ``signature`` as a list of positional arguments
        kind = inspect.Parameter.POSITIONAL_OR_KEYWORD
        signature = inspect.Signature([inspect.Parameter(name, kind=kind) for name in signature])

    template_src = "<%def name='_func" + str(signature) + "'>\n" + code + "\n</%def>"
    return template_from(template_src).get_def('_func')


def template_for(filename):
    """
    Returns the Mako template object created from the file
    which has the same name as ``filename`` and the extension ``.mako``.
    Typically used in kernel modules as ``template_for(__file__)``.
    """
    name, _ext = os.path.splitext(os.path.abspath(filename))
    return make_template(name + '.mako', filename=True)


def wrap_in_tuple(seq_or_elem):
    """
    If ``seq_or_elem`` is a sequence, converts it to a ``tuple``,
    otherwise returns a tuple with a single element ``seq_or_elem``.
    """
    if seq_or_elem is None:
        return tuple()
    elif isinstance(seq_or_elem, str):
        return (seq_or_elem,)
    elif isinstance(seq_or_elem, collections.abc.Iterable):
        return tuple(seq_or_elem)
    else:
        return (seq_or_elem,)


def normalize_axis(ndim, axis):
    """
    Transforms a (possibly negative) array axis into a non-negative one.
    Raises ``IndexError`` if the axis is out of range.
    """
    if axis < 0:
        axis += ndim
    if axis < 0 or axis >= ndim:
        raise IndexError("Array axis out of range")
    return axis


def are_axes_innermost(ndim, axes):
    inner_axes = list(range(ndim - len(axes), ndim))
    return all(axis == inner_axis for axis, inner_axis in zip(axes, inner_axes))


def make_axes_innermost(ndim, axes):
    """
    Given the total number of array axes and a list of axes in this range,
    produce a transposition plan (suitable e.g. for ``numpy.transpose()``)
    that will move make the given axes innermost (in the order they're given).
    Returns the transposition plan, and the plan to transpose the resulting array back
    to the original axes order.
    """
    orig_order = list(range(ndim))
    outer_axes = [i for i in orig_order if i not in axes]
    transpose_to = outer_axes + list(axes)

    transpose_from = [None] * ndim
    for i, axis in enumerate(transpose_to):
        transpose_from[axis] = i

    return tuple(transpose_to), tuple(transpose_from)


def replace_item(seq, position, value):
    """
    Returns a tuple made of ``seq`` with the element at ``position`` replaced by ``value``.
    """
    result = list(seq)
    result[position] = value
    return tuple(result)
