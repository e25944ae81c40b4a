import os
from setuptools import setup

NAME = 'cfautoscale'


def getPackages(base):
    """
    Recursively find python packages.
    """
    packages = []

    for directory, _, files in os.walk(base):
        if '__init__.py' in files:
            packages.append(directory.replace(os.sep, '.'))

    return packages

packages = getPackages(NAME)


setup(
    name=NAME,
    version='0.2.0',
    description='cf CLI command to configure autoscaling bindings',
    packages=packages,
    license="Apache 2.0",
    python_requires='>=3.8',
    install_requires=[
        'attrs',
        'jsonschema',
        'pyOpenSSL',
        'service_identity',
        'toolz',
        'treq',
        'Twisted[tls]',
        'zope.interface',
    ],
    extras_require={
        'test': ['mock', 'pytest'],
    },
    entry_points={
        'console_scripts': [
            'cf-configure-autoscaling = cfautoscale.cli:run',
        ],
    },
)
