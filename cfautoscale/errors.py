"""
Errors raised while gathering dependencies and configuring a binding.

Every error renders as a single line with ``str()``.
"""


class BindingResolutionError(Exception):
    """
    The control plane did not report exactly one binding between the app and
    the service instance.

    :ivar int count: number of bindings that were found.
    """
    def __init__(self, app_name, service_name, count):
        if count == 0:
            msg = "couldn't find service binding for {0} to {1}".format(
                app_name, service_name)
        else:
            msg = ("found {0} service bindings for {1} to {2}, "
                   "expected exactly one").format(
                       count, app_name, service_name)
        super(BindingResolutionError, self).__init__(msg)
        self.app_name = app_name
        self.service_name = service_name
        self.count = count


class MalformedURLError(Exception):
    """
    A URL obtained from the CLI or a service instance could not be used.

    :ivar str url: the offending URL, verbatim.
    """
    def __init__(self, source, url):
        super(MalformedURLError, self).__init__(
            'invalid {0}: {1}'.format(source, url))
        self.url = url


class RangeInvariantError(Exception):
    """
    A minimum is greater than its maximum.
    """
    message = 'min must be <= max'

    def __init__(self, minimum, maximum):
        super(RangeInvariantError, self).__init__(self.message)
        self.minimum = minimum
        self.maximum = maximum


class InstanceRangeError(RangeInvariantError):
    """
    ``min_instances`` is greater than ``max_instances``.
    """
    message = 'min instances must be <= max instances'


class ThresholdRangeError(RangeInvariantError):
    """
    ``cpu_min_threshold`` is greater than ``cpu_max_threshold``.
    """
    message = 'CPU min threshold must be <= CPU max threshold'


class RemoteCallError(Exception):
    """
    Wraps a :class:`JSONClientError` with the hop that failed.

    :ivar str prefix: which call failed, e.g. ``autoscaling API``.
    :ivar error: the wrapped exception.
    """
    def __init__(self, prefix, error):
        super(RemoteCallError, self).__init__(
            '{0}: {1}'.format(prefix, error))
        self.prefix = prefix
        self.error = error


class SessionError(Exception):
    """
    A session lookup failed.
    """


class DependencyError(Exception):
    """
    The values needed to run the command could not be gathered.
    """
