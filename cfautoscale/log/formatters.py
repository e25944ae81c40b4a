"""
Composable log observers that turn log events into trace lines.

A trace line is one JSON object per event: when it happened, which part of
the command logged it, the formatted message, and the event's own fields.
For requests those are ``method``, ``url``, ``status_code`` and
``request_time``; for the workflow, ``app_name``, ``service_name`` and the
binding being read or written.
"""
import json
from datetime import datetime

from twisted.python.failure import Failure


TWISTED_FIELDS = {"message", "format", "isError", "failure", "why", "time",
                  "system"}


def describe_failure(failure):
    """
    One line naming the exception type and its message.
    """
    return '{0}: {1}'.format(failure.type.__name__, failure.getErrorMessage())


class TraceEncoder(json.JSONEncoder):
    """
    Encodes the values events carry besides plain JSON: failures become
    their one-line description, bytes are decoded and anything else is
    written as its repr.
    """
    def default(self, obj):
        if isinstance(obj, Failure):
            return describe_failure(obj)
        if isinstance(obj, bytes):
            return obj.decode('utf-8', 'replace')
        return repr(obj)


def format_message(event):
    """
    Return the event's message with its fields substituted in PEP 3101
    style. A message that can't be formatted is returned as is.
    """
    text = ''.join(event.get('message', ()))
    if not text and event.get('isError'):
        text = event.get('why') or 'Unhandled error'
    try:
        return text.format(**event)
    except (AttributeError, IndexError, KeyError, ValueError):
        return text


def trace_record(event):
    """
    Shape a Twisted log event into a trace record.
    """
    record = {
        'time': datetime.fromtimestamp(event['time']).isoformat(),
        'system': event.get('system', 'cfautoscale'),
        'message': format_message(event),
    }
    if event.get('isError') and 'failure' in event:
        record['error'] = describe_failure(event['failure'])
    for key, value in event.items():
        if key not in TWISTED_FIELDS and not key.startswith('log_'):
            record[key] = value
    return record


def TraceFilterWrapper(observer):
    """
    Create an observer that only passes on the command's own events, and
    errors from anywhere. Twisted's connection chatter is left out.

    :param ILogObserver observer: The observer to delegate to.

    :rtype: :class:`ILogObserver`
    """
    def trace_filter(event):
        system = event.get('system', '-')
        if event.get('isError'):
            if system == '-' or ',' in system:
                event['system'] = 'cfautoscale'
            observer(event)
        elif system != '-' and ',' not in system:
            observer(event)

    return trace_filter


def TraceRecordWrapper(observer):
    """
    Create an observer that calls `observer` with the :func:`trace_record`
    of each event.

    :rtype: :class:`ILogObserver`
    """
    def trace_record_observer(event):
        observer(trace_record(event))

    return trace_record_observer


def JSONLineObserver(stream):
    """
    Create an observer that writes each record to `stream` as one line of
    JSON, flushing after every line. Nothing is written once the stream is
    closed.

    :rtype: :class:`ILogObserver`
    """
    def json_line_observer(record):
        if stream.closed:
            return
        stream.write(json.dumps(record, cls=TraceEncoder))
        stream.write('\n')
        stream.flush()

    return json_line_observer
