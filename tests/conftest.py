import logging
import os

import pytest


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


class Collector(dict):
    '''Writer keeping the artifacts in memory, in the order they arrive.'''

    def __call__(self, name, data):
        assert name not in self, f'artifact \'{name}\' written twice'
        self[name] = bytes(data)


@pytest.fixture
def collector():
    return Collector()
