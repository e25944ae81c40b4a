"""
HTTP utils, such as request validation and the errors raised by the JSON
client.
"""

import re
from urllib.parse import urlsplit


_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


class JSONClientError(Exception):
    """
    Base class of everything the JSON client can fail with.
    """


class SerializationError(JSONClientError):
    """
    The request payload could not be serialized to JSON.
    """


class InvalidRequestError(JSONClientError):
    """
    The method and URL do not form a valid HTTP request.

    :ivar str method: The HTTP method that was given.
    :ivar str url: The URL that was given.
    """
    def __init__(self, method, url, reason):
        super(InvalidRequestError, self).__init__(
            'invalid request {0} {1}: {2}'.format(method, url, reason))
        self.method = method
        self.url = url


class TransportError(JSONClientError):
    """
    The request could not be sent, or no response was received.

    The message is the one of the wrapped error, so it reads as if the
    transport error was raised directly.

    :ivar reason: The underlying exception.
    """
    def __init__(self, reason):
        super(TransportError, self).__init__(str(reason))
        self.reason = reason


class UnexpectedStatusError(JSONClientError):
    """
    An error raised when a response other than 200 OK is returned.

    :param int code: HTTP response code.
    :param phrase: HTTP reason phrase as ``str`` or ``bytes``.
    :param headers: HTTP response headers, or None.
    """
    def __init__(self, code, phrase, headers=None):
        if isinstance(phrase, bytes):
            phrase = phrase.decode('latin-1')
        self.code = code
        self.phrase = phrase
        self.headers = headers
        super(UnexpectedStatusError, self).__init__(
            'unexpected response code: {0}'.format(self.status))

    @property
    def status(self):
        """
        The status line, e.g. ``418 I'm a teapot``.
        """
        return '{0} {1}'.format(self.code, self.phrase).strip()


class ResponseParseError(JSONClientError):
    """
    The response body could not be decoded into the requested type.
    """
    def __init__(self, detail):
        super(ResponseParseError, self).__init__(
            "couldn't parse response: {0}".format(detail))
        self.detail = detail


def check_request(method, url):
    """
    Make sure ``method`` and ``url`` can form an HTTP request.

    :param str method: HTTP method, e.g. ``GET``.
    :param str url: Absolute http or https URL.

    :raise InvalidRequestError: if they cannot.
    """
    if not _TOKEN.match(method or ''):
        raise InvalidRequestError(method, url, 'bad method')
    try:
        url.encode('ascii')
    except UnicodeEncodeError:
        raise InvalidRequestError(method, url, 'non-ASCII characters in URL')
    if _BAD_ESCAPE.search(url):
        raise InvalidRequestError(method, url, 'invalid URL escape')
    try:
        parts = urlsplit(url)
        parts.port
    except ValueError as e:
        raise InvalidRequestError(method, url, str(e))
    if parts.scheme not in ('http', 'https'):
        raise InvalidRequestError(method, url, 'unsupported protocol scheme')
    if not parts.hostname:
        raise InvalidRequestError(method, url, 'no host in request URL')


def headers(access_token):
    """
    Generate the set of headers sent with every request.

    :param str access_token: Sent verbatim as ``Authorization``, so it must
        already carry any ``bearer`` prefix.
    :return: A dict of header lists.
    """
    return {'Authorization': [access_token]}
