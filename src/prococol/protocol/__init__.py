"""
Prococol Protocol Layer
=======================

The wire format is line-oriented UTF-8 text. A frame carries one named
message and any number of key/value fields:

    %MSG <name>
    %KEY <key>
    %STR <value>            single-line payload
    %KEY <key>
    %TXT
    <escaped line>*         multi-line payload
    %ENDTXT
    %ENDMSG

Exactly one space separates a marker from its argument. There is no
session handshake, versioning, or termination message; a peer signals the
end of a session by closing its stream.

Modules
-------

escape.py
    Escaping of text-block lines so they cannot be mistaken for markers.

sender.py
    :class:`Sender`, the encoder. Owns the outbound stream.

receiver.py
    :class:`Receiver`, the incremental decoder, and :class:`Listener`, the
    set of callbacks it reports to.

streams.py
    Presents binary streams and file descriptors as UTF-8 text streams.
"""

from . import escape
from . import receiver
from . import sender
from . import streams

from .escape import escape as escape_line, unescape as unescape_line
from .receiver import Listener, Receiver
from .sender import Sender


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
