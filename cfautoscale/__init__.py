"""
cf CLI command that configures the autoscaling service bound to an app.
"""

__version__ = '0.2.0'
