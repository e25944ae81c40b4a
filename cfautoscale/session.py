"""
Lookups against the cf CLI's session, and gathering of everything the
workflow needs before it runs.
"""

from urllib.parse import urlencode

import attr

from twisted.internet.defer import inlineCallbacks

from zope.interface import Interface, implementer

from cfautoscale.cloud_controller import parse_resources
from cfautoscale.errors import DependencyError, SessionError
from cfautoscale.json_client import JSONClient
from cfautoscale.json_schema import api_schemas
from cfautoscale.log import log as default_log
from cfautoscale.util.config import config_value
from cfautoscale.util.http import JSONClientError
from cfautoscale.workflow import WorkflowContext


@attr.s(frozen=True)
class App(object):
    """An application, as known to the control plane."""
    name = attr.ib()
    guid = attr.ib()


@attr.s(frozen=True)
class ServiceInstance(object):
    """
    A service instance. The host of ``dashboard_url`` serves its
    autoscaling API.
    """
    name = attr.ib()
    guid = attr.ib()
    dashboard_url = attr.ib()


class ISession(Interface):
    """
    Remote session lookups. Every method raises (or fails its Deferred with)
    :class:`SessionError`.
    """

    def is_logged_in():
        """
        :return: whether the user is logged in.
        """

    def access_token():
        """
        :return: the bearer credential, including its ``bearer`` prefix.
        """

    def api_endpoint():
        """
        :return: the control plane URL.
        """

    def is_ssl_disabled():
        """
        :return: whether TLS certificates should be left unverified.
        """

    def get_app(name):
        """
        :return: Deferred firing with the :class:`App` called ``name``.
        """

    def get_service(name):
        """
        :return: Deferred firing with the :class:`ServiceInstance` called
            ``name``.
        """


@implementer(ISession)
class CFConfigSession(object):
    """
    Session read from the cf CLI config file, loaded into
    :mod:`cfautoscale.util.config`. Apps and service instances are looked up
    by name in the targeted space.

    :param http_client_factory: one-argument callable taking whether to skip
        SSL validation and returning an :class:`IHTTPClient` provider.
    """
    def __init__(self, http_client_factory, log=default_log):
        self.http_client_factory = http_client_factory
        self.log = log.bind(system='cfautoscale.session')
        self._client = None

    def is_logged_in(self):
        return bool(config_value('AccessToken') and config_value('Target'))

    def access_token(self):
        token = config_value('AccessToken')
        if not token:
            raise SessionError('no access token, use cf login')
        return token

    def api_endpoint(self):
        target = config_value('Target')
        if not target:
            raise SessionError('no API endpoint, use cf api')
        return target

    def is_ssl_disabled(self):
        return bool(config_value('SSLDisabled'))

    def space_guid(self):
        """
        :return: GUID of the targeted space.
        """
        guid = config_value('SpaceFields.GUID')
        if not guid:
            raise SessionError('no space targeted, use cf target -s SPACE')
        return guid

    def client(self):
        """
        :return: the :class:`JSONClient` used for lookups, built on first use.
        """
        if self._client is None:
            self._client = JSONClient(
                self.http_client_factory(self.is_ssl_disabled()),
                self.access_token(), self.log)
        return self._client

    @inlineCallbacks
    def _find_one(self, collection, kind, name, schema):
        url = '{0}/v2/spaces/{1}/{2}?{3}'.format(
            self.api_endpoint().rstrip('/'), self.space_guid(), collection,
            urlencode([('q', 'name:{0}'.format(name))]))
        try:
            resources = yield self.client().exchange(
                'GET', url,
                response_type=lambda body: parse_resources(body, schema))
        except JSONClientError as e:
            raise SessionError(str(e))
        if len(resources) != 1:
            raise SessionError('{0} {1} not found'.format(kind, name))
        return resources[0]

    def get_app(self, name):
        d = self._find_one('apps', 'App', name, api_schemas.apps)
        return d.addCallback(
            lambda resource: App(name=name, guid=resource['metadata']['guid']))

    def get_service(self, name):
        d = self._find_one('service_instances', 'Service instance', name,
                           api_schemas.service_instances)
        return d.addCallback(
            lambda resource: ServiceInstance(
                name=name,
                guid=resource['metadata']['guid'],
                dashboard_url=resource['entity'].get('dashboard_url') or ''))


@inlineCallbacks
def build_context(session, app_name, service_name, http_client_factory,
                  log=default_log):
    """
    Gather everything :func:`configure_autoscaling` needs.

    :param ISession session: where to look things up.
    :param str app_name: name of the app.
    :param str service_name: name of the autoscaling service instance.
    :param http_client_factory: as for :class:`CFConfigSession`. Called once.

    :raise DependencyError: naming the first lookup that failed.
    :return: Deferred firing with a :class:`WorkflowContext`.
    """
    try:
        logged_in = session.is_logged_in()
    except SessionError as e:
        raise DependencyError(str(e))
    if not logged_in:
        raise DependencyError('you need to log in')

    try:
        access_token = session.access_token()
    except SessionError as e:
        raise DependencyError("couldn't get access token: {0}".format(e))

    try:
        service = yield session.get_service(service_name)
    except SessionError as e:
        raise DependencyError("couldn't get service named {0}: {1}".format(
            service_name, e))

    try:
        api_endpoint = session.api_endpoint()
    except SessionError as e:
        raise DependencyError("couldn't get API end-point: {0}".format(e))

    try:
        app = yield session.get_app(app_name)
    except SessionError as e:
        raise DependencyError("couldn't get app {0}: {1}".format(app_name, e))

    try:
        skip_ssl_validation = session.is_ssl_disabled()
    except SessionError as e:
        raise DependencyError(
            "couldn't check if ssl verification is disabled: {0}".format(e))

    client = JSONClient(http_client_factory(skip_ssl_validation),
                        access_token, log)
    return WorkflowContext(
        app_name=app_name,
        service_name=service_name,
        app_guid=app.guid,
        service_guid=service.guid,
        dashboard_url=service.dashboard_url,
        api_endpoint=api_endpoint,
        access_token=access_token,
        client=client)
