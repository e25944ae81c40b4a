"""
Package for all cfautoscale specific logging functionality.
"""

from twisted.python.log import err, msg

from cfautoscale.log.bound import BoundLog
from cfautoscale.log.setup import observer_factory, start_tracing


log = BoundLog(msg, err).bind(system='cfautoscale')


__all__ = ['observer_factory', 'start_tracing', 'log']
