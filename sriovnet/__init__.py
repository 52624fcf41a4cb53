"""SR-IOV network resource model: node policies, node state merging, NIC id checks and CNI render data."""

__version__ = "0.1.0"

__all__ = ["group", "ranges", "nicids", "nodestate", "policy", "networks"]