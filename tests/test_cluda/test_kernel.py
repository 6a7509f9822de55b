import logging

import numpy
import pytest

import tensorscan.cluda as cluda
import tensorscan.cluda.dtypes as dtypes
from tensorscan.cluda import Snippet, TemplateRenderError, render_template
from tensorscan.cluda.kernel import render_template_source
from tensorscan.helpers import template_def, template_from


def test_snippet_from_callable():
    snippet = Snippet.create(lambda a, b: "return ${a} * ${b};")
    src = render_template_source(
        "${mul('x', 'y')}", render_kwds=dict(mul=snippet))
    assert src.strip() == "return x * y;"


def test_snippet_from_string():
    snippet = Snippet.create("float two = 2;")
    src = render_template_source("${two()}", render_kwds=dict(two=snippet))
    assert src.strip() == "float two = 2;"


def test_nested_snippets():
    inner = Snippet.create(lambda x: "(${x} + 1)")
    outer = Snippet.create(lambda x: "${inner(x)} * 2", render_kwds=dict(inner=inner))
    src = render_template_source("${outer('v')}", render_kwds=dict(outer=outer))
    # every rendered def ends with a newline
    assert " ".join(src.split()) == "(v + 1) * 2"


def test_builtins():
    tmpl = template_def([], "${dtypes.ctype(numpy.float32)}")
    assert render_template(tmpl).strip() == "float"


def test_render_error(caplog):
    tmpl = template_from("${undefined_name}")
    with caplog.at_level(logging.ERROR, logger='tensorscan.cluda.kernel'):
        with pytest.raises(TemplateRenderError):
            render_template(tmpl)
    assert any("Failed to render template" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(('val', 'dtype', 'ref'), [
    (0, numpy.float32, "0.0f"),
    (1.5, numpy.float32, "1.5f"),
    (1.5, numpy.float64, "1.5"),
    (numpy.inf, numpy.float32, "INFINITY"),
    (-numpy.inf, numpy.float32, "-INFINITY"),
    (numpy.nan, numpy.float32, "NAN"),
    (3, numpy.int32, "3"),
    (3, numpy.int64, "3L"),
    (3, numpy.uint64, "3UL"),
    ])
def test_c_constant(val, dtype, ref):
    assert dtypes.c_constant(val, dtype) == ref


def test_ctype():
    assert dtypes.ctype(numpy.float32) == "float"
    assert dtypes.ctype(numpy.int32) == "int"
    assert dtypes.ctype(numpy.bool_) == "bool"


def test_cast():
    cast = dtypes.cast(numpy.float32)
    assert cast(1).dtype == numpy.float32
    assert cast(numpy.float64(1)).dtype == numpy.float32


def test_api_lookup():
    assert cluda.api_ids() == ['reference']
    api = cluda.reference_api()
    assert api.get_id() == cluda.reference_id()
    with pytest.raises(ValueError):
        cluda.get_api('cuda')


def test_thread_arrays():
    api = cluda.reference_api()
    thr = api.Thread.create(max_sequential_scan=8)
    assert thr.device_params.max_sequential_scan == 8

    a = numpy.arange(6).reshape(2, 3).astype(numpy.float32)
    a_dev = thr.to_device(a)
    assert a_dev.shape == (2, 3) and a_dev.dtype == numpy.float32
    assert (thr.from_device(a_dev) == a).all()

    b_dev = thr.empty_like(a_dev)
    thr.to_device(a * 2, dest=b_dev)
    assert (b_dev.get() == a * 2).all()


def test_shuffled_coordinates():
    api = cluda.reference_api()
    shape = (4, 5)
    ordered = api.Thread.create()._coordinates(shape)
    shuffled = api.Thread.create(shuffle=True, seed=1)._coordinates(shape)
    assert ordered == list(numpy.ndindex(*shape))
    assert sorted(shuffled) == ordered
