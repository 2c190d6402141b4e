"""Provisioning and lookup of OpenStack Networking objects."""

__version__ = "0.1.0"
