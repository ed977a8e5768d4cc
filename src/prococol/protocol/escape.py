""" Escaping for the lines of a text block. A line that starts with zero or
    more backslashes followed by a percent sign could be mistaken for a
    protocol marker; :func:`escape` prepends one more backslash to any such
    line, and :func:`unescape` removes the leading backslashes again.

    The two are not exact inverses: :func:`unescape` strips *every* leading
    backslash in front of the percent sign, so a line that already began
    with two or more backslashes and a percent sign comes back with fewer
    backslashes than it had before escaping. Lines produced by the protocol's
    own escaping of ordinary text are unaffected.
"""

import re


# The logical line separator. Text streams translate it to the platform
# terminator on output, and map any of '\n', '\r\n' or '\r' back to it on
# input.

LINE_SEP = '\n'

_separators = re.compile(r'\r\n|\r|\n')


def escape(line):
    """ Escape a single *line* of text for inclusion in a text block.
    """

    for character in line:
        if character == '\\':
            continue
        elif character == '%':
            return '\\' + line
        else:
            return line

    return line


def unescape(line):
    """ Undo :func:`escape` for a single *line* received in a text block.
    """

    for index, character in enumerate(line):
        if character == '\\':
            continue
        elif character == '%':
            return line[index:]
        else:
            return line

    return line


def has_separator(string):
    """ Return True if *string* contains any line terminator.
    """

    return '\n' in string or '\r' in string


def split_lines(text):
    """ Split *text* into the lines that make up a text block. Unlike
        :func:`str.splitlines`, a trailing separator yields a trailing
        empty line, so that the text survives the trip across the wire.
    """

    return _separators.split(text)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
