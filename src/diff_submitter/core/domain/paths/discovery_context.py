from dataclasses import dataclass


@dataclass
class DiscoveryContext:
    """State scoped to one path-discovery invocation.

    ``externals_acknowledged`` records that the user already agreed to proceed
    without modified externals, so the same run never asks twice.
    """

    externals_acknowledged: bool = False
