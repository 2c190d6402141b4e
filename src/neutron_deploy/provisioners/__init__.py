"""Provisioners module for OpenStack Networking resource management."""

from .base import BaseProvisioner, Resource, ProvisionPlan, ChangeType
from .subnet_pool import SubnetPoolProvisioner

__all__ = [
    'BaseProvisioner',
    'Resource',
    'ProvisionPlan',
    'ChangeType',
    'SubnetPoolProvisioner',
]
