"""Connection and contract binding layer.

``ApeConnection`` lives in :mod:`rewards_pools.rpc.provider` and is imported
from there so that the pool logic does not pull in Ape at import time.
"""

from rewards_pools.rpc.contract import BoundContract, Connection

__all__ = [
    "BoundContract",
    "Connection",
]
