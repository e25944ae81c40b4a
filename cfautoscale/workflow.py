"""
Reconfigure the autoscaling binding between an app and a service instance.

The workflow is a read-modify-write over two APIs::

    resolve binding GUID (control plane)
      -> fetch binding (autoscaling API)
      -> apply overrides -> validate
      -> submit binding (autoscaling API)

Every step depends on the result of the previous one, and any failure stops
the chain before anything is written.
"""

from urllib.parse import urlencode, urlsplit, urlunsplit

import attr

from twisted.internet.defer import inlineCallbacks

from cfautoscale.binding import (
    AutoscalingBinding, apply_overrides, validate_binding)
from cfautoscale.cloud_controller import parse_resources
from cfautoscale.errors import (
    BindingResolutionError, MalformedURLError, RemoteCallError)
from cfautoscale.json_schema import api_schemas
from cfautoscale.log import log as default_log
from cfautoscale.util.http import JSONClientError


@attr.s(frozen=True)
class WorkflowContext(object):
    """
    Everything resolved before the workflow starts.

    :ivar client: the :class:`JSONClient` used for every call.
    """
    app_name = attr.ib()
    service_name = attr.ib()
    app_guid = attr.ib()
    service_guid = attr.ib()
    dashboard_url = attr.ib()
    api_endpoint = attr.ib()
    access_token = attr.ib(repr=False)
    client = attr.ib(repr=False)


def _split(url, source):
    try:
        parts = urlsplit(url)
        parts.port
    except ValueError:
        raise MalformedURLError(source, url)
    if not (parts.scheme and parts.hostname):
        raise MalformedURLError(source, url)
    return parts


def _host(parts):
    """
    Host and port of a split URL, without any user information.
    """
    host = parts.hostname
    if ':' in host:
        host = '[{0}]'.format(host)
    if parts.port is not None:
        host = '{0}:{1}'.format(host, parts.port)
    return host


def service_bindings_url(api_endpoint, app_guid, service_guid):
    """
    URL of the control plane query for bindings between the app and the
    service instance. Any path or query of ``api_endpoint`` is replaced.

    :raise MalformedURLError: if ``api_endpoint`` can't be parsed.
    """
    parts = _split(api_endpoint, 'API URL from cli')
    query = urlencode([('q', 'app_guid:{0}'.format(app_guid)),
                       ('q', 'service_instance_guid:{0}'.format(service_guid))])
    return urlunsplit((parts.scheme, parts.netloc, '/v2/service_bindings',
                       query, ''))


def binding_url(dashboard_url, binding_guid):
    """
    URL of the binding on the autoscaling API, which is served from the
    scheme and host of the service's dashboard URL.

    :raise MalformedURLError: if ``dashboard_url`` can't be parsed.
    """
    parts = _split(dashboard_url, 'dashboard URL from service instance')
    return '{0}://{1}/api/bindings/{2}'.format(
        parts.scheme, _host(parts), binding_guid)


def _remote_call_failed(prefix, failure):
    failure.trap(JSONClientError)
    raise RemoteCallError(prefix, failure.value)


def parse_service_bindings(body):
    """
    :return: list of binding GUIDs in a control plane response.
    """
    return [resource['metadata']['guid']
            for resource in parse_resources(body, api_schemas.service_bindings)]


@inlineCallbacks
def resolve_binding_guid(context, log=default_log):
    """
    Find the GUID of the one binding between the context's app and service
    instance.

    :raise BindingResolutionError: if there isn't exactly one binding.
    :raise RemoteCallError: if the control plane call fails.
    :return: Deferred firing with the GUID.
    """
    url = service_bindings_url(context.api_endpoint, context.app_guid,
                               context.service_guid)
    d = context.client.exchange('GET', url,
                                response_type=parse_service_bindings)
    d.addErrback(lambda f: _remote_call_failed(
        "couldn't retrieve service binding", f))
    guids = yield d
    if len(guids) != 1:
        raise BindingResolutionError(context.app_name, context.service_name,
                                     len(guids))
    log.msg('Found service binding {binding_guid}', binding_guid=guids[0])
    return guids[0]


def fetch_binding(context, url):
    """
    :return: Deferred firing with the :class:`AutoscalingBinding` at ``url``.
    """
    d = context.client.exchange('GET', url,
                                response_type=AutoscalingBinding.from_json)
    return d.addErrback(lambda f: _remote_call_failed('autoscaling API', f))


def submit_binding(context, url, binding):
    """
    Write ``binding`` back, always enabled and always carrying the app GUID,
    which the autoscaling API does not send back.

    :return: Deferred firing with the binding that was sent.
    """
    binding = attr.evolve(binding, app_guid=context.app_guid, enabled=True)
    d = context.client.exchange('POST', url, data=binding)
    d.addErrback(lambda f: _remote_call_failed('autoscaling API', f))
    return d.addCallback(lambda _: binding)


@inlineCallbacks
def configure_autoscaling(context, overrides, log=default_log):
    """
    Apply ``overrides`` to the app's autoscaling binding and enable it.

    :param WorkflowContext context: the resolved identifiers and client.
    :param Overrides overrides: the requested changes.

    :return: Deferred firing with the :class:`AutoscalingBinding` that was
        submitted.
    """
    log = log.bind(app_name=context.app_name,
                   service_name=context.service_name)
    binding_guid = yield resolve_binding_guid(context, log)
    url = binding_url(context.dashboard_url, binding_guid)

    current = yield fetch_binding(context, url)
    log.msg('Fetched autoscaling binding {url}', url=url,
            binding=attr.asdict(current))

    updated = validate_binding(apply_overrides(current, overrides))
    submitted = yield submit_binding(context, url, updated)
    log.msg('Submitted autoscaling binding {url}', url=url,
            binding=attr.asdict(submitted))
    return submitted
