"""Block decomposition and vertex-cut separation."""

from gmwcs.decomposition.blocks import Block, BlockCutTree, BlockDecomposition, decompose
from gmwcs.decomposition.separation import Cut, SupportGraph

__all__ = [
    "Block",
    "BlockCutTree",
    "BlockDecomposition",
    "Cut",
    "SupportGraph",
    "decompose",
]
