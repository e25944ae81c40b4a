"""
Mixins and utilities to be used for testing.
"""
import json

import attr

import mock

from twisted.internet.defer import Deferred, fail, maybeDeferred, succeed
from twisted.python.failure import Failure

from zope.interface import implementer

from cfautoscale.errors import SessionError
from cfautoscale.log.bound import BoundLog
from cfautoscale.session import App, ISession, ServiceInstance
from cfautoscale.util.config import set_config_data
from cfautoscale.util.logging_treq import IHTTPClient


def patch(testcase, *args, **kwargs):
    """
    Patches and starts a test case, taking care of the cleanup.
    """
    if not getattr(testcase, '_stopallAdded', False):
        testcase.addCleanup(mock.patch.stopall)
        testcase._stopallAdded = True

    return mock.patch(*args, **kwargs).start()


class SameJSON(object):
    """
    Compare an expected decoded JSON structure to a string of JSON by
    decoding the input string and comparing the resulting structure to our
    expected structure.

    Example::

        self.assertEqual(request.data, SameJSON({'enabled': True}))
    """
    def __init__(self, expected):
        """
        :param expected: The expected result of JSON decoding.
        """
        self._expected = expected

    def __eq__(self, other):
        return self._expected == json.loads(other)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'SameJSON({0!r})'.format(self._expected)


class CheckFailure(object):
    """
    Class that can be passed to an `assertEqual` or `assert_called_with` -
    shortens checking whether a `twisted.python.failure.Failure` wraps an
    Exception of a particular type.
    """
    def __init__(self, exception_type):
        self.exception_type = exception_type

    def __eq__(self, other):
        return isinstance(other, Failure) and other.check(
            self.exception_type) is not None

    def __ne__(self, other):
        return not self == other


class DummyException(Exception):
    """
    Fake exception
    """


def mock_log(*args, **kwargs):
    """
    Returns a BoundLog whose msg and err methods are mocks.  Makes it easier
    to test logging, since instead of making a mock object and testing::

        log.bind.return_value.msg.assert_called_with(...)

    This can be done instead::

        log.msg.assert_called_with(mock.ANY, bound_value1="val", ...)
    """
    msg = mock.Mock(spec=[])
    msg.return_value = None
    err = mock.Mock(spec=[])
    err.return_value = None
    return BoundLog(msg, err)


def set_config_for_test(testcase, data):
    """
    Set config data for test. Will reset to {} after test is run
    """
    set_config_data(data)
    testcase.addCleanup(set_config_data, {})


class StubResponse(object):
    """
    A fake pre-built Twisted Web Response object, carrying its body.
    """
    def __init__(self, code, phrase=b'OK', headers=None, body=b''):
        self.code = code
        self.phrase = phrase
        self.headers = headers
        self.body = body

    def __repr__(self):
        return 'StubResponse({0!r}, {1!r})'.format(self.code, self.phrase)


def stub_response(body, code=200, phrase=b'OK'):
    """
    Return a :class:`StubResponse` whose body is ``body``, JSON-encoded
    unless it already is bytes.
    """
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    return StubResponse(code, phrase, body=body)


@attr.s
class StubRequest(object):
    """A request received by :class:`StubHTTPClient`."""
    method = attr.ib()
    url = attr.ib()
    headers = attr.ib(default=None)
    data = attr.ib(default=None)


@implementer(IHTTPClient)
class StubHTTPClient(object):
    """
    A stub transport that answers requests, in order, from a list of
    :class:`StubResponse` and exceptions.

    :ivar requests: the :class:`StubRequest` received, in order.
    :ivar read: the responses whose body was read.
    """
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []
        self.read = []
        self.logs = []

    def request(self, method, url, headers=None, data=None, log=None):
        self.requests.append(StubRequest(method, url, headers, data))
        self.logs.append(log)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            return fail(response)
        return succeed(response)

    def content(self, response):
        self.read.append(response)
        return succeed(response.body)


class StubTreq(object):
    """
    A stub version of :class:`treq.client.HTTPClient` that returns canned
    results, in order, and records the requests made.

    :ivar requests: ``(method, url, kwargs)`` of each request.
    """
    def __init__(self, results):
        """
        :param results: responses, exceptions or Deferreds to return.
        """
        self.results = list(results)
        self.requests = []

    def request(self, method, url, **kwargs):
        """
        Return the next result, as a Deferred.
        """
        self.requests.append((method, url, kwargs))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            return fail(result)
        if isinstance(result, Deferred):
            return result
        return succeed(result)


@attr.s
class ExchangeCall(object):
    """An exchange received by :class:`StubJSONClient`."""
    method = attr.ib()
    url = attr.ib()
    data = attr.ib(default=None)


class StubJSONClient(object):
    """
    A stub :class:`JSONClient` that answers exchanges, in order, from a list
    of JSON documents (as text) and exceptions. The document is passed
    through the caller's ``response_type``, as the real client does.

    :ivar calls: the :class:`ExchangeCall` received, in order.
    """
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def exchange(self, method, url, data=None, response_type=None):
        self.calls.append(ExchangeCall(method, url, data))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            return fail(response)
        if response_type is None:
            return succeed(None)
        return maybeDeferred(response_type, json.loads(response))


@implementer(ISession)
class FakeSession(object):
    """
    A session with canned values. Set an attribute to a :class:`SessionError`
    to make the corresponding lookup fail.
    """
    def __init__(self):
        self.logged_in = True
        self.token = 'bearer some-token'
        self.endpoint = 'https://cloudcontroller.example.com'
        self.ssl_disabled = True
        self.app = App(name='app-name', guid='some-app-guid')
        self.service = ServiceInstance(
            name='service-name',
            guid='some-service-instance-guid',
            dashboard_url='http://autoscaling.example.com/something-that-doesnot-matter')
        self.app_names = []
        self.service_names = []

    def _value(self, value):
        if isinstance(value, SessionError):
            raise value
        return value

    def _deferred(self, value):
        if isinstance(value, SessionError):
            return fail(value)
        return succeed(value)

    def is_logged_in(self):
        return self._value(self.logged_in)

    def access_token(self):
        return self._value(self.token)

    def api_endpoint(self):
        return self._value(self.endpoint)

    def is_ssl_disabled(self):
        return self._value(self.ssl_disabled)

    def get_app(self, name):
        self.app_names.append(name)
        return self._deferred(self.app)

    def get_service(self, name):
        self.service_names.append(name)
        return self._deferred(self.service)
