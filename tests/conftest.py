import os
import sys

import gevent
import greenlet
import pytest

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from wikis import ENWIKI, RUWIKI, StubProvider  # noqa: E402


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def ruwiki(provider):
    return provider.get_site(RUWIKI)


@pytest.fixture
def enwiki(provider):
    return provider.get_site(ENWIKI)


def pytest_report_header(config):
    return "gevent %s  --  greenlet %s" % (gevent.__version__, greenlet.__version__)
