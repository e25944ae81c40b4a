"""
Composable HTTP request functions.

A request function takes ``(method, url, headers=None, data=None, **kwargs)``
and returns a Deferred that fires with a two-tuple of ``(response, content)``.
The decorators below wrap one request function into another, adding a single
behavior each.
"""

import json
from functools import partial, wraps

import attr

from toolz.dicttoolz import merge
from toolz.functoolz import memoize

from twisted.internet.defer import maybeDeferred

from cfautoscale.util.http import (
    JSONClientError, ResponseParseError, SerializationError, TransportError,
    UnexpectedStatusError, check_request)


def request(http_client, method, url, headers=None, data=None,
            read_content=False, log=None):
    """
    Send a request with ``http_client``.

    The body is only read when ``read_content`` is true; otherwise the
    content part of the result is :data:`None`.

    :param http_client: an :class:`IHTTPClient` provider.
    :raise InvalidRequestError: if method and URL can't form a request. The
        client is not called in that case.
    :return: Deferred firing with ``(response, content)``.
    """
    check_request(method, url)
    d = http_client.request(method, url, headers=headers, data=data, log=log)
    if read_content:
        return d.addCallback(
            lambda response: http_client.content(response).addCallback(
                lambda content: (response, content)))
    return d.addCallback(lambda response: (response, None))


def check_response(pred, result):
    """
    Ensure that the response is acceptable according to the given predicate.
    otherwise raise :exc:`UnexpectedStatusError`.

    :param pred: A callable that takes a response object and its content and
        returns :data:`True` if the response is good.
    :param result: ``(response, content)``.
    """
    response, content = result
    if pred(response, content):
        return result
    raise UnexpectedStatusError(response.code, response.phrase,
                                response.headers)


@memoize
def has_code(*codes):
    """
    Return a response success predicate that checks the status code.

    If this function is called multiple times with the same argument,
    the results will compare equal.

    :param codes: Status codes to be considered successful.
    :return: Response success predicate with a ``codes`` attribute.
    """
    def check_response_code(response, _content):
        return response.code in codes
    check_response_code.codes = codes
    return check_response_code


def json_default(obj):
    """
    ``default`` hook for :func:`json.dumps`. Objects with a ``to_json``
    method are serialized through it, other attrs instances field by field.
    """
    if callable(getattr(obj, 'to_json', None)):
        return obj.to_json()
    if attr.has(type(obj)):
        return attr.asdict(obj)
    raise TypeError('{0!r} is not JSON serializable'.format(obj))


# The request_func is the last argument of each function so that big nested
# constructs of wrappers keep each function's arguments next to its name.

def add_headers(fixed_headers, request_func):
    """
    Decorate a request function so that some fixed headers are added.

    :param fixed_headers: The headers that will be added to all requests
        made with the resulting request function. The headers passed
        override fixed_headers.
    """
    @wraps(request_func)
    def request(*args, **kwargs):
        headers = kwargs.pop('headers', None) or {}
        return request_func(*args, headers=merge(fixed_headers, headers),
                            **kwargs)
    return request


def add_error_handling(pred, request_func):
    """
    Decorate a request function with response checking as per
    :func:`check_response`.
    """
    @wraps(request_func)
    def wrapped(*args, **kwargs):
        return request_func(*args, **kwargs).addCallback(
            partial(check_response, pred))
    return wrapped


def add_transport_error_handling(request_func):
    """
    Decorate a request function so that failures other than
    :class:`JSONClientError` become :class:`TransportError`.

    This should wrap the raw request function directly, so that it only sees
    errors from sending the request.
    """
    def classify(failure):
        if failure.check(JSONClientError):
            return failure
        raise TransportError(failure.value)

    @wraps(request_func)
    def wrapped(*args, **kwargs):
        return maybeDeferred(request_func, *args, **kwargs).addErrback(classify)
    return wrapped


def add_content_only(request_func):
    """
    Decorate a request function so that it only returns content, not response
    object.

    This should be the last decorator added, since it changes the shape of
    the result object from a (response, content) to just the content.
    """
    request = lambda *args, **kwargs: request_func(*args, **kwargs).addCallback(
        lambda r: r[1])
    return wraps(request_func)(request)


def add_json_response(parser, request_func):
    """
    Decorate a request function so that it reads the body and parses it as
    JSON, then hands the decoded value to ``parser``.

    :param parser: one-argument callable turning decoded JSON into the value
        the caller wants. It may raise :class:`ResponseParseError`,
        :class:`ValueError` or :class:`TypeError`.
    """
    def parse(result):
        response, content = result
        try:
            body = json.loads(content)
        except ValueError as e:
            raise ResponseParseError(e)
        try:
            return (response, parser(body))
        except ResponseParseError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseParseError(e)

    @wraps(request_func)
    def request(*args, **kwargs):
        kwargs['read_content'] = True
        return request_func(*args, **kwargs).addCallback(parse)
    return request


def add_json_request_data(request_func):
    """
    Decorate a request function so that it JSON-serializes the request body
    and marks it as JSON.

    :raise SerializationError: synchronously, if the data can't be
        serialized.
    """
    @wraps(request_func)
    def request(*args, **kwargs):
        data = kwargs.pop('data', None)
        if data is None:
            return request_func(*args, data=None, **kwargs)
        try:
            body = json.dumps(data, default=json_default).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e))
        headers = merge(kwargs.pop('headers', None) or {},
                        {'Content-Type': ['application/json']})
        return request_func(*args, headers=headers, data=body, **kwargs)
    return request
