""" Configuration for a peer sub-process. A :class:`Config` is immutable once
    constructed; it can be built directly, from a bare command line with
    :func:`config`, or from a JSON file with :func:`Config.load`.
"""

import os

from . import json


class Config:
    """ Describe how to launch a peer.

        :ivar command: The command and arguments used to launch the peer.
        :ivar strict_sender: Whether the :class:`prococol.Sender` feeding the
            peer operates in strict mode.
        :ivar environment: Environment variables to set for the peer, on top
            of the environment inherited from this process.
        :ivar cwd: The working directory for the peer; defaults to the
            current working directory at the time of construction.
        :ivar debug: If True, lifecycle details are reported on the
            out-of-band diagnostic channel.
    """

    options = ('command', 'strict_sender', 'environment', 'cwd', 'debug')

    def __init__(self, command, strict_sender=False, environment=None, cwd=None, debug=False):

        if isinstance(command, str):
            command = (command,)

        command = tuple(str(argument) for argument in command)

        if len(command) == 0:
            raise ValueError('the command must be specified')

        if environment is None:
            environment = dict()
        else:
            environment = dict((str(key), str(value)) for key, value in environment.items())

        if cwd is None:
            cwd = os.getcwd()

        assign = object.__setattr__
        assign(self, 'command', command)
        assign(self, 'strict_sender', bool(strict_sender))
        assign(self, '_environment', environment)
        assign(self, 'cwd', str(cwd))
        assign(self, 'debug', bool(debug))


    def __setattr__(self, name, value):
        raise AttributeError('Config instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Config instances are immutable')


    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return self.as_dict() == other.as_dict()


    def __repr__(self):
        return 'Config(' + json.render(self.as_dict()) + ')'


    @property
    def environment(self):
        # Hand out a copy; the original stays untouched.
        return dict(self._environment)


    def as_dict(self):
        """ Return the configuration as a dictionary, in the same form that
            :func:`load` accepts.
        """

        values = dict()
        values['command'] = list(self.command)
        values['strict_sender'] = self.strict_sender
        values['environment'] = self.environment
        values['cwd'] = self.cwd
        values['debug'] = self.debug

        return values


    @classmethod
    def load(cls, filename):
        """ Read a configuration from the JSON file *filename*. The file must
            contain an object whose keys are drawn from :attr:`options`;
            'command' is required.
        """

        with open(filename, 'rb') as contents:
            loaded = json.loads(contents.read())

        if not isinstance(loaded, dict):
            raise ValueError('configuration file must contain a JSON object: ' + str(filename))

        for key in loaded.keys():
            if key not in cls.options:
                raise ValueError('unrecognized configuration option: ' + str(key))

        try:
            command = loaded.pop('command')
        except KeyError:
            raise ValueError('configuration file does not specify a command: ' + str(filename))

        return cls(command, **loaded)


# end of class Config



def config(*command):
    """ Return a :class:`Config` for *command* with no custom environment,
        working directory, or other options.
    """

    return Config(command)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
