"""
Draft 3 JSON schemas (http://tools.ietf.org/html/draft-zyp-json-schema-03)
of data received from the control plane and the autoscaling API.
"""
import functools

from jsonschema import Draft3Validator, FormatChecker, validate

g_format_checker = FormatChecker()

validate = functools.partial(validate, cls=Draft3Validator,
                             format_checker=g_format_checker)
