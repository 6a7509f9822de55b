"""
Kernel rendering tools and the dispatch backend.
"""

from tensorscan.cluda.kernel import Snippet, TemplateRenderError, render_template


def reference_id():
    """Returns the identifier of the reference (host-side parallel map) API."""
    return 'reference'


def api_ids():
    """
    Returns a list of identifiers for all known APIs.
    """
    return [reference_id()]


def get_api(api_id):
    """
    Returns an API module with the ``Thread``, ``Array`` and ``DeviceParameters`` classes
    for the given identifier.
    """
    if api_id == reference_id():
        import tensorscan.cluda.reference
        return tensorscan.cluda.reference
    else:
        raise ValueError("Unrecognized API: " + str(api_id))


def reference_api():
    """
    Returns the reference API module.
    """
    return get_api(reference_id())
