"""
Schemas of the JSON bodies received from remote APIs. Control plane bodies
are validated after their keys have been lower-cased.
"""

_count = {
    "type": "integer",
    "required": True
}

autoscaling_binding = {
    "type": "object",
    "description": "A binding as returned by the autoscaling API",
    "properties": {
        "app_guid": {
            "type": "string"
        },
        "min_instances": _count,
        "max_instances": _count,
        "cpu_min_threshold": _count,
        "cpu_max_threshold": _count,
        "enabled": {
            "type": "boolean",
            "required": True
        }
    }
}

_metadata = {
    "type": "object",
    "properties": {
        "guid": {
            "type": "string",
            "required": True
        }
    },
    "required": True
}


def resource_list(entity=None):
    """
    Return the schema of a control plane list response whose resources have
    metadata and, optionally, the given entity schema.
    """
    resource = {
        "type": "object",
        "properties": {
            "metadata": _metadata
        }
    }
    if entity is not None:
        resource["properties"]["entity"] = entity
    return {
        "type": "object",
        "properties": {
            "resources": {
                "type": "array",
                "items": resource,
                "required": True
            }
        }
    }


service_bindings = resource_list()

apps = resource_list()

service_instances = resource_list({
    "type": "object",
    "properties": {
        "dashboard_url": {
            "type": ["string", "null"]
        }
    },
    "required": True
})
