""" Python implementation of prococol, a line-oriented text protocol for
    exchanging named key/value messages with a cooperating local process
    over a pair of byte streams, typically a sub-process's stdin and stdout.

    The codec lives in :mod:`prococol.protocol`; :class:`Session` layers
    request/response interactions on top of it.
"""

# Utility components.

from . import errors
from . import json

# The codec.

from . import protocol
from .protocol import Listener, Receiver, Sender
from .protocol.escape import escape, unescape

# Process hosting and interactions.

from . import config
from . import dispatch
from . import host
from . import session

from .config import Config
from .dispatch import Dispatcher
from .errors import InteractionConflict, PreconditionViolation, PrococolError, ProtocolViolation
from .host import Streams, SubProcess
from .session import Session

__version__ = '0.1.0'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
