""" Process hosts supply the streams a :class:`prococol.session.Session`
    talks over. :class:`Streams` wraps streams the caller already has, such
    as a pair of pipes; :class:`SubProcess` launches a peer process and talks
    to it over its stdin and stdout, forwarding anything the peer writes to
    stderr as out-of-band diagnostic output.

    The peer is expected to construct a :class:`prococol.Receiver` on its
    own stdin, and a :class:`prococol.Sender` on its stdout.
"""

import logging
import os
import subprocess
import sys
import threading

from .protocol import receiver
from .protocol import streams
from .protocol.sender import Sender

logger = logging.getLogger(__name__)


class Listener(receiver.Listener):
    """ Extends :class:`prococol.protocol.receiver.Listener` with the side
        channel: lines of diagnostic output from the peer.
    """

    def on_error_output(self, line):
        """ Called for each line read from the diagnostic stream. The default
            is to write the line to our own stderr. This is called directly
            from the thread reading the diagnostic stream; be sure to hand
            the data off to the appropriate thread for processing.
        """

        print(line, file=sys.stderr)


# end of class Listener



class Streams:
    """ Host a protocol session over existing streams. *output* feeds the
        :class:`Sender`, *input* feeds the :class:`Receiver`, and the
        optional *errors* stream is forwarded line-by-line as diagnostic
        output. Each can be a binary or text stream, or a file descriptor.
        The *strict* flag is handed to the :class:`Sender`.

        :ivar sender: The :class:`Sender` used to write to the peer.
    """

    def __init__(self, output, input, errors=None, strict=False):

        self.strict = strict
        self.listener = None
        self.threads = list()

        self.output = None
        self.input = None
        self.errors = None
        self.sender = None

        if output is not None:
            self._attach(output, input, errors)


    def _attach(self, output, input, errors):

        self.output = output
        self.input = input
        self.errors = errors
        self.sender = Sender(output, self.strict)


    def start(self, listener):
        """ Start the background threads that read from the peer, reporting
            everything they receive to *listener*. Both threads are daemon
            threads, and exit when their stream is closed.
        """

        if self.listener is not None:
            raise RuntimeError('this host has already been started')

        if self.sender is None:
            raise RuntimeError('no streams to start with')

        self.listener = listener

        decoder = receiver.Receiver(self.input, listener)
        self._thread(decoder.run, 'prococol: input')

        if self.errors is not None:
            self._thread(self._forward_errors, 'prococol: errors')


    def _thread(self, target, name):

        thread = threading.Thread(target=target, name=name)
        thread.daemon = True
        thread.start()
        self.threads.append(thread)


    def _forward_errors(self):
        """ Pass each line of the diagnostic stream to the listener, until the
            stream is closed or fails.
        """

        listener = self.listener
        stream = streams.reader(self.errors)

        try:
            while True:
                line = stream.readline()
                if line == '':
                    break

                listener.on_error_output(streams.chomp(line))

        except (OSError, ValueError) as error:
            listener.on_io_failure(error)


    def close(self):
        """ Close the output stream, which is how a peer is asked to finish
            up. What the peer does about it is up to the peer.
        """

        if self.sender is not None and not self.sender.out.closed:
            self.sender.out.close()


    def join(self, timeout=None):
        """ Wait for the reader threads to exit. Returns True if they all
            exited within *timeout* seconds.
        """

        for thread in self.threads:
            thread.join(timeout)

        for thread in self.threads:
            if thread.is_alive():
                return False

        return True


# end of class Streams



class SubProcess(Streams):
    """ Launch a peer process as described by *config*, a
        :class:`prococol.config.Config` instance, and host a protocol session
        over its standard streams. The process is not launched until
        :func:`start` is called; if :func:`start` completes without raising
        an exception, the process is running.
    """

    def __init__(self, config):

        Streams.__init__(self, None, None, strict=config.strict_sender)

        self.config = config
        self.name = config.command[0]
        self.process = None


    def __repr__(self):
        if self.process is None:
            return 'SubProcess(%s, not started)' % (' '.join(self.config.command))
        return 'SubProcess(%s, pid=%d)' % (' '.join(self.config.command), self.process.pid)


    @property
    def alive(self):
        """ True if the peer has been started and has not yet exited.
        """

        if self.process is None:
            return False

        return self.process.poll() is None


    def start(self, listener):
        """ Launch the peer, then start the reader threads. Any failure to
            launch is raised as an :class:`OSError`.
        """

        if self.process is not None:
            raise RuntimeError('this sub-process has already been started')

        config = self.config
        command = config.command

        if config.debug:
            listener.on_error_output('Starting sub-process:')
            listener.on_error_output('  Command: ' + command[0])
            for argument in command[1:]:
                listener.on_error_output('  Arg: ' + argument)
            listener.on_error_output('  CWD: ' + config.cwd)

            environment = config.environment
            if len(environment) > 0:
                listener.on_error_output('  Env:')
                for key, value in environment.items():
                    listener.on_error_output('    ' + key + ' -> ' + value)

        environment = dict(os.environ)
        environment.update(config.environment)

        pipe = subprocess.PIPE
        process = subprocess.Popen(command, stdin=pipe, stdout=pipe, stderr=pipe,
                                   cwd=config.cwd, env=environment)

        logger.debug('started %s as pid %d', self.name, process.pid)

        self.process = process
        self._attach(process.stdin, process.stdout, process.stderr)
        Streams.start(self, listener)


    def close(self):
        """ Close the peer's stdin. This may prompt it to exit, if it expects
            that sort of thing.
        """

        if self.alive and self.config.debug:
            self.listener.on_error_output(self.name + ': Closing stdin.')

        # Closed whether or not the peer is still running.

        Streams.close(self)


    def kill(self):
        """ Terminate the peer forcibly.
        """

        if self.process is None:
            return

        if self.config.debug:
            self.listener.on_error_output(self.name + ': Killing sub-process.')

        logger.debug('killing %s (pid %d)', self.name, self.process.pid)
        self.process.kill()


    def wait(self, timeout=None):
        """ Wait for the peer to exit, and return its exit status. Raises
            :class:`subprocess.TimeoutExpired` if *timeout* seconds pass first.
        """

        if self.process is None:
            raise RuntimeError('this sub-process has not been started')

        return self.process.wait(timeout)


# end of class SubProcess


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
