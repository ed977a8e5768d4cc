''' JSON encoding for the few places prococol needs it: configuration files,
    and rendering field mappings on the out-of-band diagnostic channel.

    :func:`dumps` always returns bytes and :func:`loads` accepts bytes or
    str, whichever backend is in use. msgspec is preferred; orjson is used
    if msgspec is missing, and the standard library only if neither is
    installed.
'''

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    try:
        import orjson
    except ImportError:
        import json


if msgspec is not None:
    backend = 'msgspec'
    dumps = msgspec.json.Encoder().encode
    loads = msgspec.json.Decoder().decode

elif orjson is not None:
    backend = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads

else:
    backend = 'json'

    def dumps(value):
        return json.dumps(value, separators=(',', ':')).encode()

    loads = json.loads


def render(value):
    ''' Return the JSON encoding of *value* as a str, ready for display.
    '''

    return dumps(value).decode()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
