"""
GBDT Components Package

This package contains the building blocks of the boosted tree engine:
nodes, the split-searching tree builder, the per-round gradient tree and
the objective-specific gradient computer.
"""

from .tree_node import DecisionTreeNode
from .data_transforms import validate_input_data, sigmoid, clamp_unit
from .gradient_computer import GradientComputer, OBJECTIVES
from .tree_builder import TreeBuilder, SplitCandidate, SORT_SCOPES
from .gradient_tree import GradientTree

__all__ = [
    'DecisionTreeNode',
    'validate_input_data',
    'sigmoid',
    'clamp_unit',
    'GradientComputer',
    'OBJECTIVES',
    'TreeBuilder',
    'SplitCandidate',
    'SORT_SCOPES',
    'GradientTree'
]
