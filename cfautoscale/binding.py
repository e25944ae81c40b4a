"""
Autoscaling binding model, and the pure steps of reconfiguring one.
"""

import attr

from jsonschema import ValidationError

from toolz.dicttoolz import valfilter

from cfautoscale.errors import InstanceRangeError, ThresholdRangeError
from cfautoscale.json_schema import api_schemas, validate
from cfautoscale.util.http import ResponseParseError


@attr.s(frozen=True)
class AutoscalingBinding(object):
    """
    The autoscaling policy attached to one app/service pairing. Attribute
    names are the wire names used by the autoscaling API.
    """
    min_instances = attr.ib()
    max_instances = attr.ib()
    cpu_min_threshold = attr.ib()
    cpu_max_threshold = attr.ib()
    enabled = attr.ib()
    app_guid = attr.ib(default="")

    @classmethod
    def from_json(cls, body):
        """
        Build a binding from a decoded autoscaling API body.

        :raise ResponseParseError: if the body does not look like a binding.
        """
        try:
            validate(body, api_schemas.autoscaling_binding)
        except ValidationError as e:
            raise ResponseParseError(e.message)
        return cls(min_instances=body['min_instances'],
                   max_instances=body['max_instances'],
                   cpu_min_threshold=body['cpu_min_threshold'],
                   cpu_max_threshold=body['cpu_max_threshold'],
                   enabled=body['enabled'],
                   app_guid=body.get('app_guid', ""))

    def to_json(self):
        """
        :return: the full binding as sent back to the autoscaling API.
        """
        return {
            'app_guid': self.app_guid,
            'min_instances': self.min_instances,
            'max_instances': self.max_instances,
            'cpu_min_threshold': self.cpu_min_threshold,
            'cpu_max_threshold': self.cpu_max_threshold,
            'enabled': self.enabled,
        }


@attr.s(frozen=True)
class Overrides(object):
    """
    Requested changes to a binding. ``None`` means "leave as is".
    """
    min_instances = attr.ib(default=None)
    max_instances = attr.ib(default=None)
    cpu_min_threshold = attr.ib(default=None)
    cpu_max_threshold = attr.ib(default=None)

    @classmethod
    def from_flags(cls, min_instances=0, max_instances=0, min_threshold=0,
                   max_threshold=0):
        """
        Convert command line flags, where 0 means the flag was not given.
        """
        def absent(value):
            return value or None
        return cls(min_instances=absent(min_instances),
                   max_instances=absent(max_instances),
                   cpu_min_threshold=absent(min_threshold),
                   cpu_max_threshold=absent(max_threshold))


def apply_overrides(binding, overrides):
    """
    :return: a copy of ``binding`` with every given override applied.
    """
    changes = valfilter(lambda value: value is not None,
                        attr.asdict(overrides))
    return attr.evolve(binding, **changes)


def validate_binding(binding):
    """
    Check the minimum/maximum pairs of ``binding``.

    :raise InstanceRangeError: if min instances > max instances.
    :raise ThresholdRangeError: if CPU min threshold > CPU max threshold.
    :return: ``binding``.
    """
    if binding.min_instances > binding.max_instances:
        raise InstanceRangeError(binding.min_instances, binding.max_instances)
    if binding.cpu_min_threshold > binding.cpu_max_threshold:
        raise ThresholdRangeError(binding.cpu_min_threshold,
                                  binding.cpu_max_threshold)
    return binding
