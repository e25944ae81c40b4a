"""
``cf configure-autoscaling APP_NAME SERVICE_INSTANCE``

Reconfigure and enable the autoscaling binding between an app and an
autoscaling service instance. Flags that are not given leave the current
value alone.

Examples:
`cf-configure-autoscaling my-app my-autoscaler --min-instances 2`
sets the minimum instance count to 2 and enables autoscaling.
`CF_TRACE=true cf-configure-autoscaling my-app my-autoscaler`
only enables autoscaling, tracing every request to stderr.
"""

import os
import sys
from argparse import ArgumentParser, ArgumentTypeError
from functools import partial

from twisted.internet import task

from cfautoscale import __version__
from cfautoscale.binding import Overrides
from cfautoscale.log import log as default_log, start_tracing
from cfautoscale.session import CFConfigSession, build_context
from cfautoscale.util.config import cf_config_path, load_config_file
from cfautoscale.util.logging_treq import make_http_client
from cfautoscale.workflow import configure_autoscaling


COMMAND = 'configure-autoscaling'


def non_negative_int(value):
    """
    argparse type for counts and percentages; 0 means "not given".
    """
    try:
        number = int(value)
    except ValueError:
        raise ArgumentTypeError('invalid integer value: {0!r}'.format(value))
    if number < 0:
        raise ArgumentTypeError('must not be negative: {0}'.format(number))
    return number


def make_parser():
    """
    :return: the :class:`ArgumentParser` of the command.
    """
    parser = ArgumentParser(
        prog='cf {0}'.format(COMMAND),
        description='Configure an instance of the Autoscaling Service')
    parser.add_argument('app_name', metavar='APP_NAME')
    parser.add_argument('service_name', metavar='SERVICE_INSTANCE')
    parser.add_argument(
        '--min-instances', type=non_negative_int, default=0,
        help='(optional) set the minimum instance count')
    parser.add_argument(
        '--max-instances', type=non_negative_int, default=0,
        help='(optional) set the maximum instance count')
    parser.add_argument(
        '--min-threshold', type=non_negative_int, default=0,
        help='(optional) set the minimum cpu threshold percentage')
    parser.add_argument(
        '--max-threshold', type=non_negative_int, default=0,
        help='(optional) set the maximum cpu threshold percentage')
    parser.add_argument(
        '--trace', action='store_true',
        help='trace requests to stderr, same as CF_TRACE=true')
    parser.add_argument(
        '--version', action='version',
        version='%(prog)s {0}'.format(__version__))
    return parser


def report_success(binding, app_name, out):
    """
    Print a one-line summary of the submitted binding.
    """
    out.write(
        'Autoscaling enabled for {0}: instances {1}-{2}, '
        'CPU threshold {3}%-{4}%\n'.format(
            app_name, binding.min_instances, binding.max_instances,
            binding.cpu_min_threshold, binding.cpu_max_threshold))
    return binding


def report_failure(failure, out, log=default_log):
    """
    Print the error as a single line and exit with status 1.
    """
    log.msg('configure-autoscaling failed', reason=failure)
    out.write('{0}\n'.format(failure.value))
    raise SystemExit(1)


def run_command(reactor, parsed, session=None, http_client_factory=None,
                out=sys.stdout, log=default_log):
    """
    Run the command for already parsed arguments.

    :param session: an :class:`ISession` provider, by default a
        :class:`CFConfigSession`.
    :param http_client_factory: builds the transport from the SSL policy, by
        default :func:`make_http_client` on ``reactor``.

    :return: Deferred firing with the submitted binding, or failing with
        :class:`SystemExit` after the error was printed.
    """
    if http_client_factory is None:
        http_client_factory = partial(make_http_client, reactor)
    if session is None:
        session = CFConfigSession(http_client_factory, log)
    overrides = Overrides.from_flags(
        min_instances=parsed.min_instances,
        max_instances=parsed.max_instances,
        min_threshold=parsed.min_threshold,
        max_threshold=parsed.max_threshold)

    d = build_context(session, parsed.app_name, parsed.service_name,
                      http_client_factory, log)
    d.addCallback(configure_autoscaling, overrides, log)
    d.addCallbacks(partial(report_success, app_name=parsed.app_name, out=out),
                   partial(report_failure, out=out, log=log))
    return d


def main(reactor, *argv):
    """
    Entry point run by :func:`task.react`.
    """
    parsed = make_parser().parse_args(argv)
    start_tracing('true' if parsed.trace else os.environ.get('CF_TRACE'),
                  reactor)
    try:
        load_config_file(cf_config_path())
    except ValueError as e:
        sys.stdout.write("couldn't read cf config: {0}\n".format(e))
        raise SystemExit(1)
    return run_command(reactor, parsed)


def run():
    """
    Console script entry point.
    """
    task.react(main, sys.argv[1:])


if __name__ == '__main__':
    run()
