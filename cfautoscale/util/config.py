"""
Implement a global configuration API, fed from the cf CLI config file.
"""
import json
import os

from toolz.dicttoolz import get_in

_config_data = {}


def set_config_data(data):
    """
    Set the global configuration data.

    :param dict data: The configuration data, probably loaded from some JSON.
    """
    global _config_data
    _config_data = data


def config_value(name):
    """
    :param str name: Name is a . separated path to a configuration value
        stored in a nested dictionary.

    :returns: The value specified in the configuration file, or None.
    """
    return get_in(name.split('.'), _config_data)


def cf_config_path(environ=os.environ):
    """
    Path of the cf CLI config file: ``$CF_HOME/.cf/config.json``, where
    ``CF_HOME`` defaults to the user's home directory.
    """
    home = environ.get('CF_HOME') or os.path.expanduser('~')
    return os.path.join(home, '.cf', 'config.json')


def load_config_file(path):
    """
    Load a JSON config file into the global configuration. A missing file
    loads an empty configuration.

    :raise ValueError: if the file is not valid JSON.
    :return: the loaded data.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        data = {}
    set_config_data(data)
    return data
