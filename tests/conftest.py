import os
import pytest
import sys

import prococol

here = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, here)


@pytest.fixture
def dispatcher():

    dispatcher = prococol.Dispatcher()

    yield dispatcher

    dispatcher.shutdown(wait=True)


@pytest.fixture
def peer_config():
    """ Options for launching echopeer.py as a sub-process. The source tree
        is added to PYTHONPATH so the peer can import prococol whether or not
        the package is installed.
    """

    source = os.path.join(os.path.dirname(here), 'src')
    python_path = os.environ.get('PYTHONPATH')

    if python_path:
        python_path = source + os.pathsep + python_path
    else:
        python_path = source

    options = dict()
    options['environment'] = {'PYTHONPATH': python_path}
    options['cwd'] = here

    command = (sys.executable, os.path.join(here, 'echopeer.py'))
    return command, options


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
