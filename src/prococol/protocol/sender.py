""" Encode and send prococol messages. A :class:`Sender` is typically
    constructed around ``sys.stdout`` in a sub-process, or around the stdin
    pipe of a :class:`subprocess.Popen` instance in the parent process.

    The :class:`Sender` does nothing to protect the caller from blocking if
    the peer stops reading and the pipe fills up. A caller that cannot afford
    to block should hand its messages to a dedicated thread, and let that
    thread drive the :class:`Sender`.
"""

import logging

from .. import errors
from . import escape
from . import streams

logger = logging.getLogger(__name__)


class Sender:
    """ Write framed messages to *out*, which can be a binary or text stream,
        or a raw file descriptor.

        If *strict* is True, the :class:`Sender` raises
        :class:`prococol.errors.PreconditionViolation` as soon as it is asked
        to produce an invalid sequence: a message started inside another
        message, a field outside of any message, a line separator in a name,
        key, or string value. If *strict* is False it does what it is told
        without complaint. The receiving end recovers from invalid sequences
        on a best-effort basis, so non-strict operation is reasonable when
        the caller does not fully control how its messages are structured.

        A :class:`Sender` is not thread-safe; only one thread should drive
        it at any given time.
    """

    def __init__(self, out, strict=False):

        self.out = streams.writer(out)
        self.message = None
        self.text = False
        self._strict = bool(strict)


    @property
    def strict(self):
        return self._strict


    def send(self, name, fields):
        """ Send a complete message named *name*. *fields* is a dictionary of
            string keys and string values; values containing a line separator
            are sent as text blocks, all other values as single-line strings.
            A field whose value is None is dropped, and never written.
        """

        self.start_message(name)

        try:
            for key, value in fields.items():
                if value is None:
                    logger.warning("Dropping None message field [msg=%s, key=%s]", name, key)
                elif escape.has_separator(value):
                    self.send_text(key, value)
                else:
                    self.send_string(key, value)
        finally:
            self.end_message()


    def start_message(self, name):
        """ Start a new message. This must be matched by a call to
            :func:`end_message`.
        """

        self._require(self.message is None, 'start_message() called with message in progress')
        self._require_no_separator(name, 'Message name')

        self.message = name
        self._line('%MSG ' + name)


    def end_message(self):
        """ End the current message and flush the output stream. This must be
            preceded by a call to :func:`start_message`, and presumably by
            some calls to :func:`send_string`, :func:`send_text`, and so on.
        """

        self._require(self.message is not None, 'end_message() called with no message in progress')

        self._line('%ENDMSG')
        self.out.flush()
        self.message = None


    def send_string(self, key, value):
        """ Send *key* and *value* as part of the current message. The *value*
            must not contain line separators; use :func:`send_text` for text
            that spans multiple lines.
        """

        self._require(self.message is not None, 'send_string() called with no message in progress')
        self._require_no_separator(key, 'Key')
        self._require_no_separator(value, 'String payload')

        self._line('%KEY ' + key)
        self._line('%STR ' + value)


    def send_text(self, key, text):
        """ Send *key* and *text* as part of the current message. The *text*
            may contain line separators; every line is escaped on the way out.
        """

        self._require(self.message is not None, 'send_text() called with no message in progress')
        self._require_no_separator(key, 'Key')

        self.start_text(key)

        for line in escape.split_lines(text):
            self.send_text_line(line)

        self.end_text()


    def start_text(self, key):
        """ Start a text block with key *key* in the current message. This must
            be followed by any number of calls to :func:`send_text_line`, and
            exactly one call to :func:`end_text`.
        """

        self._require(self.message is not None, 'start_text() called with no message in progress')
        self._require(self.text == False, 'start_text() called while existing text in progress')
        self._require_no_separator(key, 'Key')

        self._line('%KEY ' + key)
        self._line('%TXT')
        self.text = True


    def send_text_line(self, line):
        """ Escape *line* and add it to the text block in progress.
        """

        self._require(self.message is not None, 'send_text_line() called with no message in progress')
        self._require(self.text == True, 'send_text_line() called with no text in progress')
        self._require_no_separator(line, 'Text line')

        self._line(escape.escape(line))


    def text_writer(self):
        """ Return the text stream underneath this :class:`Sender`, for
            callers that want to write the content of a text block directly.

            The caller is responsible for making sure the written text does
            not collide with the protocol: every line must either go through
            :func:`prococol.protocol.escape.escape`, or at least never start
            with one of the markers (%MSG, %ENDMSG, %KEY, %STR, %TXT,
            %ENDTXT). Every line must also be terminated; a dangling partial
            line followed by :func:`end_text` will corrupt the message.
        """

        return self.out


    def end_text(self):
        """ End the text block in progress. This must be preceded by a call to
            :func:`start_text`.
        """

        self._require(self.message is not None, 'end_text() called with no message in progress')
        self._require(self.text == True, 'end_text() called with no text in progress')

        self._line('%ENDTXT')
        self.text = False


    def _line(self, line):
        self.out.write(line + escape.LINE_SEP)


    def _require(self, condition, description):
        if self._strict and not condition:
            raise errors.PreconditionViolation(description)


    def _require_no_separator(self, string, name):
        if self._strict and escape.has_separator(string):
            raise errors.PreconditionViolation(name + ' must not contain line separator')


# end of class Sender


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
