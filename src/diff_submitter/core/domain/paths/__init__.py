from diff_submitter.core.domain.paths.discovery_context import DiscoveryContext
from diff_submitter.core.domain.paths.path_status import PathStatus

__all__ = ["DiscoveryContext", "PathStatus"]
