""" Exceptions raised or reported by prococol. I/O failures are not wrapped;
    the read loops report the native :class:`OSError` (or :class:`ValueError`
    for a closed or undecodable stream) to their listener.
"""


class PrococolError(Exception):
    """ Base class for all prococol errors. """


class ProtocolViolation(PrococolError):
    """ A received line did not conform to the protocol, or arrived out of
        sequence. Instances are handed to
        :func:`prococol.protocol.receiver.Listener.on_unexpected`; the
        receiver discards the offending line and continues.
    """


class PreconditionViolation(PrococolError):
    """ A strict :class:`prococol.protocol.sender.Sender` was asked to do
        something that would produce an invalid frame: a message bracket out
        of order, or a line separator in a name, key, or string value.
    """


class InteractionConflict(PrococolError):
    """ :func:`prococol.session.Session.interact` was called while another
        interaction is still in progress.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
