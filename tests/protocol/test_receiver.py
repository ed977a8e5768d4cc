import io

import prococol
from prococol.protocol.receiver import State
from recorder import Recorder


def receive(text):
    recorder = Recorder()
    receiver = prococol.Receiver(io.StringIO(text), recorder)
    receiver.run()
    return recorder, receiver


def test_single_message():

    wire = '%MSG ping\n%KEY id\n%STR 7\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('ping', {'id': '7'})]
    assert recorder.unexpected == []
    assert recorder.failures == []
    assert receiver.state == State.IDLE


def test_text_block():

    wire = '%MSG m\n%KEY t\n%TXT\na\n\\%ENDMSG\n\n%ENDTXT\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'t': 'a\n%ENDMSG\n'})]
    assert recorder.unexpected == []


def test_leading_blank_lines_are_dropped():

    wire = '%MSG m\n%KEY t\n%TXT\n\n\nfirst\n\nlast\n%ENDTXT\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'t': 'first\n\nlast'})]


def test_empty_text_block():

    wire = '%MSG m\n%KEY t\n%TXT\n%ENDTXT\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'t': ''})]


def test_last_value_wins():

    wire = '%MSG m\n%KEY k\n%STR first\n%KEY k\n%TXT\nsecond\nline\n%ENDTXT\n%KEY k\n%STR third\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'k': 'third'})]


def test_key_outside_message():
    """ A stray %KEY is reported once, and does not disturb the next message.
    """

    wire = '%KEY k\n%MSG m\n%KEY a\n%STR b\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.violations() == ['Received %KEY outside of %MSG: %KEY k']
    assert recorder.messages == [('m', {'a': 'b'})]


def test_dangling_text():

    wire = '%MSG m\n%KEY k\n%TXT\npartial\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {})]

    violations = recorder.violations()
    assert 'Received %ENDMSG with dangling %TXT: %ENDMSG' in violations
    assert 'Received %ENDMSG with dangling %KEY: %ENDMSG' in violations
    assert len(violations) == 2

    assert receiver.state == State.IDLE
    assert receiver.key is None
    assert receiver.text is None


def test_dangling_key():

    wire = '%MSG m\n%KEY a\n%STR b\n%KEY c\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'a': 'b'})]
    assert recorder.violations() == ['Received %ENDMSG with dangling %KEY: %ENDMSG']


def test_invalid_lines_leave_state_alone():

    recorder = Recorder()
    receiver = prococol.Receiver(io.StringIO(), recorder)

    receiver.process_line('%MSG first')
    assert receiver.state == State.MESSAGE

    receiver.process_line('%MSG second')
    receiver.process_line('%STR orphan')
    receiver.process_line('%TXT')
    receiver.process_line('%ENDTXT')
    receiver.process_line('stray text')
    assert receiver.state == State.MESSAGE
    assert receiver.name == 'first'

    receiver.process_line('%KEY k')
    assert receiver.state == State.KEY

    receiver.process_line('%KEY other')
    receiver.process_line('%ENDTXT')
    assert receiver.state == State.KEY
    assert receiver.key == 'k'

    receiver.process_line('%STR v')
    receiver.process_line('%ENDMSG')

    assert recorder.messages == [('first', {'k': 'v'})]
    assert len(recorder.violations()) == 7


def test_markers_inside_text_are_violations():

    wire = '%MSG m\n%KEY t\n%TXT\none\n%KEY x\n%STR y\ntwo\n%ENDTXT\n%ENDMSG\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'t': 'one\ntwo'})]
    assert len(recorder.violations()) == 2


def test_endmsg_outside_message():

    recorder, receiver = receive('%ENDMSG\n')

    assert recorder.messages == []
    assert recorder.violations() == ['Received %ENDMSG outside of %MSG: %ENDMSG']


def test_text_outside_message():

    recorder, receiver = receive('hello\n%MSG\n%ENDMSG extra\n')

    assert recorder.messages == []
    assert len(recorder.violations()) == 3


def test_listener_exception_is_reported():

    class Exploding(Recorder):
        def on_message(self, name, fields):
            Recorder.on_message(self, name, fields)
            if name == 'bad':
                raise KeyError('boom')

    recorder = Exploding()
    wire = '%MSG bad\n%ENDMSG\n%MSG good\n%ENDMSG\n'
    prococol.Receiver(io.StringIO(wire), recorder).run()

    assert [name for name, fields in recorder.messages] == ['bad', 'good']
    assert len(recorder.unexpected) == 1
    assert isinstance(recorder.unexpected[0], KeyError)


def test_io_failure_reported_once():

    class Failing(io.StringIO):
        def readline(self, *args):
            line = io.StringIO.readline(self, *args)
            if line == '':
                raise OSError('stream went away')
            return line

    recorder = Recorder()
    receiver = prococol.Receiver(Failing('%MSG m\n%ENDMSG\n'), recorder)
    receiver.run()

    assert recorder.messages == [('m', {})]
    assert len(recorder.failures) == 1
    assert str(recorder.failures[0]) == 'stream went away'


def test_carriage_returns():

    wire = '%MSG m\r\n%KEY t\r\n%TXT\r\na\r\nb\r\n%ENDTXT\r\n%ENDMSG\r\n'
    recorder, receiver = receive(wire)

    assert recorder.messages == [('m', {'t': 'a\nb'})]


def test_binary_stream():

    wire = '%MSG café\n%KEY k\n%STR über\n%ENDMSG\n'.encode('utf-8')
    recorder = Recorder()
    prococol.Receiver(io.BytesIO(wire), recorder).run()

    assert recorder.messages == [('café', {'k': 'über'})]


def test_invalid_utf8_is_replaced():
    """ A byte that is not valid UTF-8 decodes to U+FFFD; the frames on
        either side of it are still delivered.
    """

    wire = b'%MSG a\n%ENDMSG\n%MSG b\n%KEY k\n%STR v\n%ENDMSG\n%MSG \xff\n%ENDMSG\n%MSG c\n%ENDMSG\n'

    recorder = Recorder()
    prococol.Receiver(io.BytesIO(wire), recorder).run()

    assert recorder.messages == [('a', {}), ('b', {'k': 'v'}), ('\ufffd', {}), ('c', {})]
    assert recorder.failures == []
    assert recorder.unexpected == []


def test_default_listener_prints(capsys):

    listener = prococol.Listener()
    listener.on_unexpected(prococol.ProtocolViolation('Received %KEY outside of %MSG: %KEY k'))
    listener.on_io_failure(OSError('closed'))

    captured = capsys.readouterr()
    assert 'Received %KEY outside of %MSG: %KEY k' in captured.err
    assert 'OSError: closed' in captured.err


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
