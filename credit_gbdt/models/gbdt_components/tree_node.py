"""
Decision Tree Node Implementation

This module contains the DecisionTreeNode class that represents
individual nodes of a gradient tree.
"""

from typing import Any, Dict, Optional, Sequence

from ..exceptions import ModelFormatError


class DecisionTreeNode:
    """
    決定木のノードクラス

    ノードはリーフか分割ノードのどちらかであり、
    make_leaf / make_split 経由でのみ完全な状態で生成される。

    Attributes:
    -----------
    feature_idx : int or None
        分割に使用する特徴のインデックス（リーフノードの場合はNone）
    threshold : float or None
        分割の閾値（リーフノードの場合はNone）
    left : DecisionTreeNode or None
        左の子ノード（value <= threshold）
    right : DecisionTreeNode or None
        右の子ノード
    is_leaf : bool
        リーフノードかどうか
    value : float or None
        リーフノードの場合の予測値（生の値）
    depth : int
        ノードの深さ
    n_samples : int
        このノードのサンプル数
    information_gain : float
        分割による利得（分割ノードの場合）
    """

    def __init__(self, depth: int = 0):
        self.feature_idx = None
        self.threshold = None
        self.left = None
        self.right = None
        self.is_leaf = False
        self.value = None
        self.depth = depth
        self.n_samples = 0
        self.information_gain = 0.0

    @classmethod
    def make_leaf(cls, value: float, depth: int = 0, n_samples: int = 0) -> 'DecisionTreeNode':
        node = cls(depth=depth)
        node.is_leaf = True
        node.value = float(value)
        node.n_samples = n_samples
        return node

    @classmethod
    def make_split(
        cls,
        feature_idx: int,
        threshold: float,
        left: 'DecisionTreeNode',
        right: 'DecisionTreeNode',
        depth: int = 0,
        n_samples: int = 0,
        information_gain: float = 0.0
    ) -> 'DecisionTreeNode':
        if left is None or right is None:
            raise ValueError("A split node needs both children")
        node = cls(depth=depth)
        node.feature_idx = int(feature_idx)
        node.threshold = float(threshold)
        node.left = left
        node.right = right
        node.n_samples = n_samples
        node.information_gain = float(information_gain)
        return node

    def predict_value(self, row: Sequence[float]) -> float:
        """
        単一サンプルをリーフまで辿り、生の値を返す

        Parameters:
        -----------
        row : sequence of float
            1サンプル分の特徴量

        Returns:
        --------
        value : float
            到達したリーフの値（子の欠落や短すぎる行は0）
        """
        node = self
        while node is not None:
            if node.is_leaf:
                return node.value if node.value is not None else 0.0
            if node.feature_idx is None or node.feature_idx >= len(row):
                return 0.0
            if row[node.feature_idx] <= node.threshold:
                node = node.left
            else:
                node = node.right
        return 0.0

    def iter_nodes(self):
        """部分木の全ノードを (ノード, 相対深さ) で列挙（深さ優先）"""
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            yield node, level
            if not node.is_leaf:
                stack.extend((child, level + 1) for child in (node.right, node.left) if child is not None)

    def get_depth(self) -> int:
        """
        このノードを根とする部分木の深さを計算
        """
        # 分割ノードは子が欠けていても1段と数える
        return max(level if node.is_leaf else level + 1 for node, level in self.iter_nodes())

    def count_nodes(self) -> int:
        """
        このノードを根とする部分木のノード数を計算
        """
        return sum(1 for _ in self.iter_nodes())

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON化可能な辞書に変換（子ノードは入れ子）
        """
        if self.is_leaf:
            return {
                'feature_idx': None,
                'threshold': None,
                'value': self.value,
                'is_leaf': True,
                'left': None,
                'right': None
            }
        return {
            'feature_idx': self.feature_idx,
            'threshold': self.threshold,
            'value': None,
            'is_leaf': False,
            'left': self.left.to_dict() if self.left else None,
            'right': self.right.to_dict() if self.right else None
        }

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]], depth: int = 0) -> 'DecisionTreeNode':
        """
        to_dict の出力からノードを復元

        Raises:
        -------
        ModelFormatError
            必須フィールドの欠落や型不正の場合
        """
        if not isinstance(payload, dict):
            raise ModelFormatError(f"Node payload must be a mapping, got {type(payload).__name__}")

        try:
            if payload['is_leaf']:
                return cls.make_leaf(payload['value'], depth=depth)
            return cls.make_split(
                payload['feature_idx'],
                payload['threshold'],
                cls.from_dict(payload['left'], depth + 1),
                cls.from_dict(payload['right'], depth + 1),
                depth=depth
            )
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, ModelFormatError):
                raise
            raise ModelFormatError(f"Malformed node at depth {depth}: {exc!r}") from exc

    def __str__(self) -> str:
        if self.is_leaf:
            return f"Leaf(depth={self.depth}, samples={self.n_samples}, value={self.value:.6f})"
        return f"Node(depth={self.depth}, samples={self.n_samples}, feature={self.feature_idx}, threshold={self.threshold:.4f})"

    def __repr__(self) -> str:
        return self.__str__()
