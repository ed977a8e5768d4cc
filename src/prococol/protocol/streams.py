""" Helpers to present any byte or character stream as a UTF-8 text stream.
    Sub-process pipes arrive as binary streams; tests and in-process peers
    tend to use :class:`io.StringIO` or an existing text stream.
"""

import io


encoding = 'UTF-8'


def is_text(stream):
    """ Return True if *stream* already reads and writes str, not bytes.
    """

    if isinstance(stream, io.TextIOBase):
        return True

    try:
        stream.encoding
    except AttributeError:
        return False

    return True


def reader(stream):
    """ Return a text stream suitable for line-by-line reading of *stream*.
        File descriptors (integers) are opened in binary mode first.
    """

    if isinstance(stream, int):
        stream = open(stream, 'rb')

    if is_text(stream):
        return stream

    # Undecodable bytes decode to U+FFFD instead of raising.

    return io.TextIOWrapper(stream, encoding=encoding, errors='replace')


def writer(stream):
    """ Return a text stream suitable for writing to *stream*. Output is
        buffered; the caller is expected to flush at the end of each frame.
    """

    if isinstance(stream, int):
        stream = open(stream, 'wb')

    if is_text(stream):
        return stream

    return io.TextIOWrapper(stream, encoding=encoding)


def chomp(line):
    """ Remove the line terminator, if any, from a line returned by
        :func:`readline`.
    """

    if line.endswith('\n'):
        line = line[:-1]
    if line.endswith('\r'):
        line = line[:-1]

    return line


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
