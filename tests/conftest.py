import pytest

from tensorscan.cluda import reference_api


def pytest_addoption(parser):
    parser.addoption("--shuffle", dest="shuffle", action="store",
        help="Visit output coordinates of every dispatch in random order: no/yes/both",
        default="both", choices=["no", "yes", "both"])


def pytest_generate_tests(metafunc):
    if 'shuffle' in metafunc.fixturenames:
        sh = metafunc.config.option.shuffle
        shs = dict(both=[False, True], no=[False], yes=[True])[sh]
        sh_ids = [{False: 'ordered', True: 'shuffled'}[sh] for sh in shs]
        metafunc.parametrize('shuffle', shs, ids=sh_ids)


@pytest.fixture
def thr(shuffle):
    api = reference_api()
    return api.Thread.create(shuffle=shuffle, seed=1234)


@pytest.fixture
def some_thr():
    """A thread visiting coordinates in order, for tests that do not depend on it."""
    api = reference_api()
    return api.Thread.create()
