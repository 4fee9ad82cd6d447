"""
Tree Builder

This module handles the construction of a single gradient tree,
including split finding, leaf value computation, and the recursive
tree building logic.
"""

from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from .tree_node import DecisionTreeNode

EPSILON = 1e-10

SORT_SCOPES = ("round", "node")


class SplitCandidate(NamedTuple):
    feature_idx: int
    threshold: float
    gain: float
    left_indices: np.ndarray
    right_indices: np.ndarray


class TreeBuilder:
    """
    決定木構築を担当するクラス

    Attributes:
    -----------
    max_depth : int
        最大深度
    min_child_weight : float
        分割を試みるのに必要な最小サンプル数
    sort_scope : str
        "round": ラウンド開始時に全データで計算したソート順を全深さで再利用
        "node": 各ノードの部分集合でソート順を再計算
    """

    def __init__(
        self,
        max_depth: int = 4,
        min_child_weight: float = 1.0,
        sort_scope: str = "round"
    ):
        if sort_scope not in SORT_SCOPES:
            raise ValueError(f"Unsupported sort_scope: {sort_scope}")
        self.max_depth = max_depth
        self.min_child_weight = min_child_weight
        self.sort_scope = sort_scope

    @staticmethod
    def compute_sorted_indices(X: np.ndarray) -> List[np.ndarray]:
        """
        特徴量ごとに全行を値の昇順に並べたインデックスを計算

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量

        Returns:
        --------
        sorted_indices : list of array-like, shape=(n_samples,)
            特徴量ごとの安定ソート順
        """
        return [np.argsort(X[:, feature_idx], kind="stable") for feature_idx in range(X.shape[1])]

    def build_tree(
        self,
        X: np.ndarray,
        gradients: np.ndarray,
        sorted_indices: Optional[Sequence[np.ndarray]] = None
    ) -> DecisionTreeNode:
        """
        決定木を構築

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        gradients : array-like, shape=(n_samples,)
            このラウンドの勾配
        sorted_indices : list of array-like, optional
            ラウンド単位のソート順（省略時は X から計算）

        Returns:
        --------
        root : DecisionTreeNode
            構築された決定木のルートノード
        """
        if sorted_indices is None:
            sorted_indices = self.compute_sorted_indices(X)

        return self._build_tree_recursive(X, np.asarray(gradients, dtype=np.float64), 0, sorted_indices)

    def _build_tree_recursive(
        self,
        X: np.ndarray,
        gradients: np.ndarray,
        depth: int,
        sorted_indices: Sequence[np.ndarray]
    ) -> DecisionTreeNode:
        """
        再帰的に決定木を構築

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            このノードに属する行（局所インデックス）
        gradients : array-like, shape=(n_samples,)
            X と位置で揃えた勾配
        depth : int
            現在の深さ
        sorted_indices : list of array-like
            分割探索に使うソート順
        """
        n_samples = X.shape[0]
        grad_sum = float(np.sum(gradients))

        # 終了条件のチェック
        if self._should_stop_splitting(n_samples, grad_sum, depth):
            return DecisionTreeNode.make_leaf(
                self._compute_leaf_value(grad_sum, n_samples), depth=depth, n_samples=n_samples
            )

        if self.sort_scope == "node" and depth > 0:
            sorted_indices = self.compute_sorted_indices(X)

        # 最適な分割を探索
        best_split = self._search_best_split(X, gradients, grad_sum, sorted_indices)

        if best_split is None:
            # 分割が見つからない場合、リーフノードとして設定
            return DecisionTreeNode.make_leaf(
                self._compute_leaf_value(grad_sum, n_samples), depth=depth, n_samples=n_samples
            )

        left_idx = best_split.left_indices
        right_idx = best_split.right_indices

        # 子ノードは親と同じソート順を受け取る
        left = self._build_tree_recursive(X[left_idx], gradients[left_idx], depth + 1, sorted_indices)
        right = self._build_tree_recursive(X[right_idx], gradients[right_idx], depth + 1, sorted_indices)

        return DecisionTreeNode.make_split(
            best_split.feature_idx,
            best_split.threshold,
            left,
            right,
            depth=depth,
            n_samples=n_samples,
            information_gain=best_split.gain
        )

    def _should_stop_splitting(self, n_samples: int, grad_sum: float, depth: int) -> bool:
        """
        分割を停止するかどうかを判定
        """
        return (
            depth >= self.max_depth or
            n_samples < self.min_child_weight or
            abs(grad_sum) < EPSILON or
            n_samples < 2
        )

    def _search_best_split(
        self,
        X: np.ndarray,
        gradients: np.ndarray,
        grad_sum: float,
        sorted_indices: Sequence[np.ndarray]
    ) -> Optional[SplitCandidate]:
        """
        最適な分割を探索

        ソート順に隣接する2行の境界を走査し、左右の勾配和から利得を計算する。
        ソート順がこのノードの範囲外の行を指す場合、その境界は集計前に読み飛ばす。

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        gradients : array-like, shape=(n_samples,)
            勾配
        grad_sum : float
            このノードの勾配和
        sorted_indices : list of array-like
            特徴量ごとのソート順

        Returns:
        --------
        best_split : SplitCandidate or None
            最適な分割（利得が 1e-10 未満なら None）
        """
        n_samples, n_features = X.shape
        grads = gradients.tolist()
        parent_score = grad_sum * grad_sum / (n_samples + EPSILON)

        best_gain = 0.0
        best = None

        for feature_idx in range(n_features):
            if feature_idx >= len(sorted_indices) or sorted_indices[feature_idx] is None:
                continue

            order = np.asarray(sorted_indices[feature_idx])
            order_list = order.tolist()
            column = X[:, feature_idx].tolist()

            left_sum = 0.0
            left_count = 0

            for i in range(len(order_list) - 1):
                current_idx = order_list[i]
                next_idx = order_list[i + 1]

                # 範囲外の行は欠損として扱う
                if current_idx >= n_samples or next_idx >= n_samples:
                    continue

                left_sum += grads[current_idx]
                left_count += 1
                right_sum = grad_sum - left_sum
                right_count = n_samples - left_count

                current_value = column[current_idx]
                next_value = column[next_idx]
                if current_value == next_value:
                    continue

                gain = (
                    left_sum * left_sum / (left_count + EPSILON) +
                    right_sum * right_sum / (right_count + EPSILON) -
                    parent_score
                )

                if gain > best_gain:
                    best_gain = gain
                    best = (feature_idx, (current_value + next_value) / 2, order, i)

        if best is None or best_gain < EPSILON:
            return None

        feature_idx, threshold, order, boundary = best
        left_indices = order[:boundary + 1]
        right_indices = order[boundary + 1:]

        return SplitCandidate(
            feature_idx=feature_idx,
            threshold=threshold,
            gain=best_gain,
            left_indices=left_indices[left_indices < n_samples],
            right_indices=right_indices[right_indices < n_samples]
        )

    @staticmethod
    def _compute_leaf_value(grad_sum: float, n_samples: int) -> float:
        """
        リーフノードの値を計算: sum(g) / (n + 1e-10)
        """
        return grad_sum / (n_samples + EPSILON)
