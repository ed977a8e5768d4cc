""" Receive prococol messages from a stream, decode them, and hand them off
    to a :class:`Listener`. A :class:`Receiver` is typically constructed
    around ``sys.stdin`` in a sub-process, or around the stdout pipe of a
    :class:`subprocess.Popen` instance in the parent process.

    The parent process will need a separate thread to drive the receiver;
    the sub-process may drive its receiver from its main thread or from a
    background thread, depending on its own architecture.
"""

import enum
import sys
import traceback

from .. import errors
from . import escape
from . import streams


class State(enum.Enum):
    """ The parse state of a :class:`Receiver`. Exactly one is active at any
        given time.
    """

    IDLE = 'idle'
    MESSAGE = 'message'
    KEY = 'key'
    TEXT = 'text'


class Listener:
    """ Handles notifications from a :class:`Receiver`. All of these methods
        are called from whatever thread is executing :func:`Receiver.run`;
        a listener that needs to process the data elsewhere is responsible
        for handing it off to the appropriate thread.
    """

    def on_message(self, name, fields):
        """ Called when a complete message is available. *fields* is a new
            dictionary owned by the listener.
        """

        raise NotImplementedError('must be implemented by the subclass')


    def on_io_failure(self, error):
        """ Called if reading from the input stream fails. The read loop exits
            after reporting the failure.
        """

        text = traceback.format_exception(type(error), error, error.__traceback__)
        sys.stderr.write(''.join(text))


    def on_unexpected(self, error):
        """ Called when received data does not conform to the protocol, in
            which case *error* is a :class:`prococol.errors.ProtocolViolation`,
            or when :func:`on_message` raised an exception.
        """

        if isinstance(error, errors.ProtocolViolation):
            print(str(error), file=sys.stderr)
        else:
            text = traceback.format_exception(type(error), error, error.__traceback__)
            sys.stderr.write(''.join(text))


# end of class Listener



class Receiver:
    """ Read lines from *stream* and decode them into messages, which are
        delivered to *listener*. The *stream* can be a binary or text stream,
        or a raw file descriptor.

        A line that is invalid in the current parse state is reported to
        the listener and discarded; the parse state is left alone. The one
        exception is %ENDMSG, which always delivers whatever message is open
        and resets the parse state, reporting any key or text block that was
        left dangling.
    """

    def __init__(self, stream, listener):

        self.stream = streams.reader(stream)
        self.listener = listener

        self.state = State.IDLE
        self.name = None
        self.fields = None
        self.key = None
        self.text = None


    def run(self):
        """ Read and process lines until the input stream is closed. An I/O
            error is reported once to the listener, and ends the loop.
        """

        try:
            while True:
                line = self.stream.readline()
                if line == '':
                    break

                self.process_line(streams.chomp(line))

        except (OSError, ValueError) as error:
            self.listener.on_io_failure(error)


    def process_line(self, line):
        """ Advance the parse state by one line of input. The trailing line
            terminator, if any, must already be removed.
        """

        state = self.state

        if line.startswith('%MSG '):
            if state == State.IDLE:
                self.name = line[5:]
                self.fields = dict()
                self.state = State.MESSAGE
            else:
                self.report('%MSG', 'while processing %MSG', line)

        elif line == '%ENDMSG':
            if state == State.IDLE:
                self.report('%ENDMSG', 'outside of %MSG', line)
            else:
                self.end_message(line)

        elif line.startswith('%KEY '):
            if state == State.MESSAGE:
                self.key = line[5:]
                self.state = State.KEY
            else:
                self.reject('%KEY', line)

        elif line.startswith('%STR '):
            if state == State.KEY:
                self.fields[self.key] = line[5:]
                self.key = None
                self.state = State.MESSAGE
            else:
                self.reject('%STR', line)

        elif line == '%TXT':
            if state == State.KEY:
                self.text = list()
                self.state = State.TEXT
            else:
                self.reject('%TXT', line)

        elif line == '%ENDTXT':
            if state == State.TEXT:
                self.fields[self.key] = escape.LINE_SEP.join(self.text)
                self.key = None
                self.text = None
                self.state = State.MESSAGE
            else:
                self.reject('%ENDTXT', line)

        elif state == State.TEXT:
            line = escape.unescape(line)

            # A blank first line is indistinguishable from an empty buffer,
            # and is dropped.

            if len(self.text) == 0 and line == '':
                return

            self.text.append(line)

        else:
            self.reject('text', line)


    def end_message(self, line):
        """ Deliver the open message and unconditionally reset the parse
            state.
        """

        name = self.name
        fields = self.fields
        dangling_key = self.key is not None
        dangling_text = self.text is not None

        self.name = None
        self.fields = None
        self.key = None
        self.text = None
        self.state = State.IDLE

        try:
            self.listener.on_message(name, fields)
        except Exception as error:
            self.listener.on_unexpected(error)

        if dangling_key:
            self.report('%ENDMSG', 'with dangling %KEY', line)
        if dangling_text:
            self.report('%ENDMSG', 'with dangling %TXT', line)


    def reject(self, kind, line):
        """ Report *line* as out of sequence for the current parse state.
        """

        state = self.state

        if state == State.IDLE:
            description = 'outside of %MSG'
        elif state == State.MESSAGE:
            description = 'with no %KEY'
        elif state == State.KEY:
            description = 'with no %TXT' if kind in ('%ENDTXT', 'text') else 'while processing %KEY'
        else:
            description = 'while processing %TXT'

        self.report(kind, description, line)


    def report(self, kind, description, line):
        error = errors.ProtocolViolation('Received %s %s: %s' % (kind, description, line))
        self.listener.on_unexpected(error)


# end of class Receiver


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
