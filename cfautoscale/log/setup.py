"""
Observer factories which will be used to configure trace logging.
"""
import os
import sys

from twisted.python.log import startLoggingWithObserver

from cfautoscale.log.formatters import (
    JSONLineObserver,
    TraceFilterWrapper,
    TraceRecordWrapper,
)


def observer_factory(stream=None):
    """
    Log trace lines to `stream`, sys.stderr by default.
    """
    if stream is None:
        stream = sys.stderr
    return TraceFilterWrapper(TraceRecordWrapper(JSONLineObserver(stream)))


def trace_destination(value):
    """
    Interpret a ``CF_TRACE`` style setting.

    :param str value: "true" for stderr, "false" or empty for nothing,
        anything else is a file path.
    :return: None, ``sys.stderr`` or the path as a string.
    """
    if not value or value.lower() == 'false':
        return None
    if value.lower() == 'true':
        return sys.stderr
    return os.path.expanduser(value)


def start_tracing(value, reactor, start=startLoggingWithObserver):
    """
    Start sending log events to the destination named by ``value``. A trace
    file is closed when ``reactor`` shuts down.

    :return: The stream being written to, or None if tracing is off.
    """
    destination = trace_destination(value)
    if destination is None:
        return None
    if destination is sys.stderr:
        stream = destination
    else:
        stream = open(destination, 'a')
        reactor.addSystemEventTrigger('after', 'shutdown', stream.close)
    start(observer_factory(stream), setStdout=False)
    return stream
