""" Communicate with a peer as a series of request/response interactions.
    A :class:`Session` sends a request on behalf of the caller, then feeds
    every message that comes back to the caller's handler until the handler
    declares the interaction complete. Only one interaction may be in
    progress at a time.

    All callbacks, handlers and out-of-band diagnostics alike, are posted
    to a single serializing executor supplied by the caller, so they run
    one at a time in the order they were received, no matter which reader
    thread produced them.
"""

import sys
import threading
import traceback

from . import errors
from . import json
from .host import Listener as HostListener, SubProcess
from .config import Config


class Session:
    """ Manage interactions over *host*, a :class:`prococol.host.Streams` or
        :class:`prococol.host.SubProcess` instance that has not yet been
        started; the :class:`Session` starts it.

        The *executor* is anything with a :func:`submit` method that accepts
        a callable and its arguments, and that runs submitted work one item
        at a time: a :class:`prococol.dispatch.Dispatcher`, or a
        :class:`concurrent.futures.ThreadPoolExecutor` with a single worker.
        Running callbacks concurrently is not supported.

        :ivar sender: The :class:`prococol.Sender` for the peer.
    """

    def __init__(self, executor, host):

        self.executor = executor
        self.host = host

        # The active interactor is cleared on the executor thread, set by the
        # caller of interact(), and read by the input reader thread.

        self._actor = None
        self._actor_lock = threading.Lock()

        host.start(_Listener(self))
        self.sender = host.sender


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        return 'Session(' + repr(self.host) + ')'


    @classmethod
    def spawn(cls, executor, *command, **options):
        """ Launch *command* as a sub-process and return a :class:`Session`
            communicating with it. Any keyword *options* are passed through
            to :class:`prococol.config.Config`.
        """

        config = Config(command, **options)
        return cls(executor, SubProcess(config))


    def close(self):
        """ Close the stream to the peer, ending this session.
        """

        self.host.close()


    def interacting(self):
        """ Return True if an interaction is in progress.
        """

        return self._actor is not None


    def interact(self, name, fields, handler):
        """ Start an interaction: send a message named *name* with the given
            *fields* to the peer, then pass every message received from the
            peer to *handler* until the interaction is complete.

            The *handler* is called as ``handler(name, fields)`` on the
            executor; it returns True when the interaction is finished, and
            False if further messages are expected.

            Raises :class:`prococol.errors.InteractionConflict` if an
            interaction is already in progress. If sending fails, the
            interaction is abandoned and the exception is raised here.
        """

        # The handler is installed before the request goes out, so that a
        # prompt reply cannot slip past it.

        with self._actor_lock:
            if self._actor is not None:
                raise errors.InteractionConflict('Interaction already in progress.')
            self._actor = handler

        try:
            self.sender.send(name, fields)
        except BaseException:
            self._finish(handler)
            raise


    def on_error_output(self, text):
        """ Called for all out-of-band communication from the peer: its
            diagnostic output, reports of I/O and protocol failures, messages
            received outside of an interaction, and handlers that raised an
            exception. The default writes *text* to stderr. This is always
            called via the executor.
        """

        print(text, file=sys.stderr)


    def _finish(self, actor):
        with self._actor_lock:
            if self._actor is actor:
                self._actor = None


    def _deliver(self, name, fields):
        """ Hand a received message to the active interactor. This runs on
            the executor.
        """

        actor = self._actor

        if actor is None:
            # The interaction finished while this message was queued.
            self.on_error_output(_unsolicited(name, fields))
            return

        try:
            finished = actor(name, fields)
        except Exception:
            self.on_error_output(traceback.format_exc())
            return

        if finished:
            self._finish(actor)


    def _post(self, method, *args):
        """ Submit *method* to the executor. Anything raised by the method is
            written to stderr; there is nowhere else left to report it.
        """

        def call():
            try:
                method(*args)
            except Exception:
                sys.stderr.write(traceback.format_exc())

        try:
            self.executor.submit(call)
        except RuntimeError:
            # The executor has been shut down.
            sys.stderr.write(traceback.format_exc())


# end of class Session



class _Listener(HostListener):
    """ Route everything the host's reader threads produce onto the session
        executor.
    """

    def __init__(self, session):
        self.session = session


    def on_message(self, name, fields):

        session = self.session

        if session._actor is None:
            self.on_error_output(_unsolicited(name, fields))
        else:
            session._post(session._deliver, name, fields)


    def on_io_failure(self, error):
        self.on_unexpected(error)


    def on_unexpected(self, error):
        text = traceback.format_exception(type(error), error, error.__traceback__)
        self.on_error_output(''.join(text).rstrip('\n'))


    def on_error_output(self, line):
        session = self.session
        session._post(session.on_error_output, line)


# end of class _Listener



def _unsolicited(name, fields):
    return 'Message received outside of interaction [name=%s, data=%s]' % (name, json.render(fields))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
