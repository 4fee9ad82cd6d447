"""
Gradient Tree

This module contains the GradientTree class: one additive term of the
boosted ensemble, fit to a single round of gradients.
"""

from typing import Any, Dict, Optional, Sequence

import numpy as np

from .tree_node import DecisionTreeNode
from .tree_builder import TreeBuilder
from ..exceptions import ModelFormatError


class GradientTree:
    """
    勾配木クラス

    ルートノードを1つだけ所有し、構築後は変更されない。
    """

    def __init__(
        self,
        max_depth: int = 4,
        min_child_weight: float = 1.0,
        sort_scope: str = "round"
    ):
        self.max_depth = max_depth
        self.min_child_weight = min_child_weight
        self.sort_scope = sort_scope

        self.tree_builder = TreeBuilder(
            max_depth=max_depth,
            min_child_weight=min_child_weight,
            sort_scope=sort_scope
        )

        # 木の状態
        self.root = None
        self.is_fitted = False

    def fit(
        self,
        X: np.ndarray,
        gradients: np.ndarray,
        sorted_indices: Optional[Sequence[np.ndarray]] = None
    ) -> 'GradientTree':
        """
        勾配に対して決定木を訓練

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        gradients : array-like, shape=(n_samples,)
            このラウンドの勾配
        sorted_indices : list of array-like, optional
            ラウンド単位のソート順

        Returns:
        --------
        self : GradientTree
            訓練済みの決定木
        """
        if self.is_fitted:
            raise RuntimeError("GradientTree instances are built once and never refit")

        self.root = self.tree_builder.build_tree(X, gradients, sorted_indices)
        self.is_fitted = True
        return self

    def predict_value(self, row: Sequence[float]) -> float:
        """1行分の生のリーフ値（ルートが無ければ0）"""
        if self.root is None:
            return 0.0
        return self.root.predict_value(row)

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        全行の生のリーフ値

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量

        Returns:
        --------
        values : array-like, shape=(n_samples,)
            各行が到達したリーフの値
        """
        return np.array([self.predict_value(row) for row in X], dtype=np.float64)

    def count_feature_splits(self, counts: np.ndarray) -> np.ndarray:
        """
        特徴量ごとの分割ノード数を counts に加算

        Parameters:
        -----------
        counts : array-like, shape=(n_features,)
            加算先の配列（範囲外の特徴量インデックスは無視）
        """
        for feature_idx in self._split_features():
            if 0 <= feature_idx < len(counts):
                counts[feature_idx] += 1
        return counts

    def max_feature_index(self) -> int:
        """分割に使われた最大の特徴量インデックス（分割が無ければ -1）"""
        return max(self._split_features(), default=-1)

    def _split_features(self):
        if self.root is None:
            return []
        return [node.feature_idx for node, _ in self.root.iter_nodes() if not node.is_leaf]

    def to_dict(self) -> Dict[str, Any]:
        return {'root': self.root.to_dict() if self.root is not None else None}

    @classmethod
    def from_dict(
        cls,
        payload: Dict[str, Any],
        max_depth: int = 4,
        min_child_weight: float = 1.0,
        sort_scope: str = "round"
    ) -> 'GradientTree':
        if not isinstance(payload, dict) or 'root' not in payload:
            raise ModelFormatError("Tree payload must be a mapping with a 'root' entry")

        tree = cls(max_depth=max_depth, min_child_weight=min_child_weight, sort_scope=sort_scope)
        tree.root = DecisionTreeNode.from_dict(payload['root'])
        tree.is_fitted = True
        return tree

    def get_info(self) -> Dict[str, Any]:
        """
        決定木の情報を取得
        """
        info = {
            "max_depth": self.max_depth,
            "min_child_weight": self.min_child_weight,
            "sort_scope": self.sort_scope,
            "is_fitted": self.is_fitted
        }

        if self.is_fitted and self.root is not None:
            info.update({
                "actual_depth": self.root.get_depth(),
                "n_nodes": self.root.count_nodes()
            })

        return info

    def __str__(self) -> str:
        if not self.is_fitted:
            return "GradientTree(not fitted)"

        info = self.get_info()
        return f"GradientTree(depth={info.get('actual_depth', 0)}, nodes={info.get('n_nodes', 0)})"

    def __repr__(self) -> str:
        return self.__str__()
