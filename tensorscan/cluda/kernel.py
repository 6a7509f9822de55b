import logging

from mako import exceptions

import tensorscan.helpers as helpers
from tensorscan.helpers import template_from, template_def, extract_signature_and_value
from tensorscan.cluda import dtypes


logger = logging.getLogger(__name__)


class TemplateRenderError(Exception):
    """
    Thrown by :py:func:`render_template` if ``Mako`` fails to render a kernel template.
    """
    pass


def render_template(template, *args, **kwds):
    # add some "built-ins" to the kernel
    render_kwds = dict(dtypes=dtypes, helpers=helpers)
    assert set(render_kwds).isdisjoint(set(kwds))
    render_kwds.update(kwds)

    try:
        src = template.render(*args, **render_kwds)
    except Exception as exc:
        logger.error(
            "Failed to render template with"
            "\nargs: {args}\nkwds: {kwds}\nsource:\n{source}\n"
            "{exception}".format(
                args=args, kwds=kwds, source=getattr(template, 'source', None),
                exception=exceptions.text_error_template().render()))
        raise TemplateRenderError("Template rendering failed") from exc
    return src


class Snippet:
    """
    Contains a CLUDA snippet, a piece of code that is rendered
    in place with the names passed to it as positional arguments.

    :param template_src: a ``Mako`` template with the snippet code,
        or a string with the template source.
    :type template_src: ``str`` or ``Mako`` template.
    :param render_kwds: a dictionary which will be used to render the template.
        Can contain other snippets.
    """

    def __init__(self, template_src, render_kwds=None):
        self.template = template_from(template_src)
        self.render_kwds = {} if render_kwds is None else dict(render_kwds)

    @classmethod
    def create(cls, func_or_str, render_kwds=None):
        """
        Creates a snippet from the ``Mako`` def:

        * if ``func_or_str`` is a function, then the def has the same signature as ``func_or_str``,
          and the body equal to the string it returns;
        * if ``func_or_str`` is a string, then the def has empty signature.
        """
        signature, code = extract_signature_and_value(func_or_str)
        return cls(template_def(signature, code), render_kwds=render_kwds)


class RenderableSnippet:

    def __init__(self, tmpl_def, render_kwds):
        self.template_def = tmpl_def
        self.render_kwds = render_kwds

    def __call__(self, *args):
        return render_template(self.template_def, *args, **self.render_kwds)

    def __str__(self):
        return self()


def process(obj):
    if isinstance(obj, Snippet):
        render_kwds = process(obj.render_kwds)
        return RenderableSnippet(obj.template, render_kwds)
    elif isinstance(obj, dict):
        return dict(((k, process(v)) for k, v in obj.items()))
    elif isinstance(obj, tuple):
        return tuple(process(v) for v in obj)
    elif isinstance(obj, list):
        return [process(v) for v in obj]
    else:
        return obj


def render_template_source(src, render_args=None, render_kwds=None):
    """
    Renders ``src`` (a ``Mako`` template def or a string with its source),
    turning all the snippets in ``render_args`` and ``render_kwds`` into callables
    which render themselves in place.
    """
    if render_args is None:
        render_args = []
    if render_kwds is None:
        render_kwds = {}

    render_args = process(render_args)
    main_renderable = process(Snippet(src, render_kwds=render_kwds))

    return main_renderable(*render_args)
