from fabric_catalog.models.fabric import Fabric
from fabric_catalog.models.variant import FabricVariant

__all__ = ["Fabric", "FabricVariant"]
