# AGPL-3.0 License

"""
Provisioning backends. CdkProvisioner (crow_api.provisioning.cdk_provisioner)
needs aws-cdk-lib and is imported on demand.
"""

from crow_api.provisioning.base_provisioner import Provisioner

__all__ = [
    "Provisioner",
]
