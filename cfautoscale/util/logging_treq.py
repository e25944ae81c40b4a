"""
A wrapper around a treq client to log all requests along with the status
code and time it took.
"""
import attr

import treq
from treq.client import HTTPClient

from twisted.internet import reactor
from twisted.internet.ssl import CertificateOptions
from twisted.web.client import (
    Agent, BrowserLikePolicyForHTTPS, HTTPConnectionPool)
from twisted.web.iweb import IPolicyForHTTPS

from zope.interface import Interface, implementer

from cfautoscale.log import log as default_log


class IHTTPClient(Interface):
    """
    Raw HTTP transport used by the JSON client.
    """

    def request(method, url, headers=None, data=None, log=None):
        """
        Send one request.

        :param str method: HTTP method.
        :param str url: Absolute URL.
        :param dict headers: Mapping of header name to a list of values.
        :param bytes data: Request body or None.
        :param log: Bound log to record the request with.

        :return: Deferred firing with the response, which has ``code``,
            ``phrase`` and ``headers`` attributes.
        """

    def content(response):
        """
        :return: Deferred firing with the body of ``response`` as bytes.
        """


@implementer(IHTTPClient)
@attr.s
class LoggingTreq(object):
    """
    Sends requests with a treq client, logging each request and its outcome,
    including the time the request took to finish.

    :ivar treq_client: a :class:`treq.client.HTTPClient`, or anything with
        the same ``request`` method.
    :ivar clock: a reactor to use for timing requests - will use the default
        reactor if not provided.
    :ivar log: a BoundLog instance - will use the default BoundLog instance
        in :obj:`cfautoscale.log` if not provided.
    """
    treq_client = attr.ib()
    clock = attr.ib(default=reactor)
    log = attr.ib(default=default_log)

    def request(self, method, url, headers=None, data=None, log=None):
        """Wrapper around :meth:`HTTPClient.request` that logs the request."""
        log = (log or self.log).bind(system='http.request', url=url,
                                     method=method)
        start_time = self.clock.seconds()

        log.msg("Request to {method} {url} starting.")
        d = self.treq_client.request(method, url, headers=headers or {},
                                     data=data)

        def log_response(response):
            log.msg("Request to {method} {url} resulted in a {status_code} "
                    "response after {request_time} seconds.",
                    status_code=response.code,
                    request_time=self.clock.seconds() - start_time)
            return response

        def log_failure(failure):
            log.msg("Request to {method} {url} failed after "
                    "{request_time} seconds.",
                    reason=failure,
                    request_time=self.clock.seconds() - start_time)
            return failure

        return d.addCallbacks(log_response, log_failure)

    def content(self, response):
        """Read the whole response body with :func:`treq.content`."""
        return treq.content(response)


@implementer(IPolicyForHTTPS)
class NoVerificationPolicy(object):
    """
    TLS policy that accepts any server certificate, used when the cf CLI was
    told to skip SSL validation.
    """
    def creatorForNetloc(self, hostname, port):
        return CertificateOptions(verify=False)


def make_http_client(reactor, skip_ssl_validation):
    """
    Build the transport for one command run.

    :param reactor: The reactor to send requests with.
    :param bool skip_ssl_validation: Whether server certificates are left
        unverified.

    :return: a :class:`LoggingTreq`.
    """
    if skip_ssl_validation:
        policy = NoVerificationPolicy()
    else:
        policy = BrowserLikePolicyForHTTPS()
    agent = Agent(reactor, contextFactory=policy,
                  pool=HTTPConnectionPool(reactor, persistent=False))
    return LoggingTreq(HTTPClient(agent), clock=reactor)
