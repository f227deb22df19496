"""attpl tree nodes.

Immutable, frozen dataclass nodes produced by the parser and consumed by the
renderer. All nodes carry ``lineno``/``col_offset`` for diagnostics.

Node Types:
- Output: Data (literal text), Output (interpolation)
- Control flow: Loop (forEach/for), Conditional (if/else)
- Structure: Template (root), Extends, BlockSlot, BlockDef, Include

"""

from attpl.nodes.base import Node
from attpl.nodes.control_flow import Conditional, Loop, LoopKind
from attpl.nodes.output import Data, Output
from attpl.nodes.structure import BlockDef, BlockSlot, Extends, Include, Template

__all__ = [
    "BlockDef",
    "BlockSlot",
    "Conditional",
    "Data",
    "Extends",
    "Include",
    "Loop",
    "LoopKind",
    "Node",
    "Output",
    "Template",
]
