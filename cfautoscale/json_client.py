"""
Authenticated JSON-over-HTTP client shared by the session and the workflow.
"""

from functools import partial

import attr

from twisted.internet.defer import maybeDeferred

from cfautoscale.log import log as default_log
from cfautoscale.util.http import headers
from cfautoscale.util.pure_http import (
    add_content_only, add_error_handling, add_headers, add_json_request_data,
    add_json_response, add_transport_error_handling, has_code, request)


@attr.s(frozen=True)
class JSONClient(object):
    """
    Performs one authenticated request per :meth:`exchange`.

    :ivar http_client: an :class:`IHTTPClient` provider. TLS policy is part
        of it, so it is fixed for the lifetime of this client.
    :ivar str access_token: Sent verbatim as the ``Authorization`` header.
    :ivar log: bound log passed to the transport.
    """
    http_client = attr.ib()
    access_token = attr.ib(repr=False)
    log = attr.ib(default=default_log, repr=False)

    def exchange(self, method, url, data=None, response_type=None):
        """
        Send ``data`` as JSON and decode the response with ``response_type``.

        :param str method: HTTP method.
        :param str url: Absolute URL.
        :param data: JSON-able object, attrs instance, or None for no body.
        :param response_type: callable taking the decoded JSON body, or None
            if the caller does not want the body. In that case the body is
            neither read nor parsed.

        :return: Deferred firing with ``response_type(body)`` or None. It
            fails with a :class:`JSONClientError`: SerializationError,
            InvalidRequestError, TransportError, UnexpectedStatusError or
            ResponseParseError.
        """
        request_ = add_json_request_data(
            add_error_handling(
                has_code(200),
                add_headers(
                    headers(self.access_token),
                    add_transport_error_handling(
                        partial(request, self.http_client)))))
        if response_type is not None:
            request_ = add_json_response(response_type, request_)
        request_ = add_content_only(request_)
        return maybeDeferred(request_, method, url, data=data, log=self.log)
