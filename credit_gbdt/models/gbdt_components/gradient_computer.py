"""
Gradient Computer

This module handles the objective-specific parts of boosting: the starting
raw prediction, the per-row gradients, the output transform and the
training loss.
"""

import numpy as np

from .data_transforms import sigmoid, clamp_unit

OBJECTIVES = ("binary", "regression")

# 回帰目的関数の残差減衰係数
REGRESSION_DAMPING = 0.1


class GradientComputer:
    """
    勾配計算を担当するクラス

    Attributes:
    -----------
    objective : str
        目的関数の種類（"binary" または "regression"）
    """

    def __init__(self, objective: str = "binary"):
        if objective not in OBJECTIVES:
            raise ValueError(f"Unsupported objective: {objective}")
        self.objective = objective

    def compute_initial_prediction(self, y: np.ndarray) -> float:
        """
        初期予測値（生の値）を計算

        binary では確率ではなく生の定数 0.5 を用いる。

        Parameters:
        -----------
        y : array-like, shape=(n_samples,)
            ラベル。None または空の場合、回帰では 0.0

        Returns:
        --------
        base : float
            全サンプル共通の初期予測値
        """
        if self.objective == "regression":
            if y is None or len(y) == 0:
                return 0.0
            return float(np.mean(y))
        return 0.5

    def compute_gradients(self, y: np.ndarray, raw_predictions: np.ndarray) -> np.ndarray:
        """
        負の勾配を計算

        Parameters:
        -----------
        y : array-like, shape=(n_samples,)
            真のラベル
        raw_predictions : array-like, shape=(n_samples,)
            現在の生の予測値

        Returns:
        --------
        gradients : array-like, shape=(n_samples,)
            binary: y - sigmoid(p)、regression: (y - clamp(p, 0, 1)) * 0.1
        """
        if self.objective == "regression":
            return (y - clamp_unit(raw_predictions)) * REGRESSION_DAMPING
        return y - sigmoid(raw_predictions)

    def transform(self, raw_predictions):
        """生の予測値を [0, 1] の出力に変換"""
        if self.objective == "regression":
            return clamp_unit(raw_predictions)
        return sigmoid(raw_predictions)

    def compute_loss(self, y: np.ndarray, raw_predictions: np.ndarray) -> float:
        """
        学習損失を計算（binary: logloss、regression: MSE）
        """
        outputs = self.transform(raw_predictions)
        if self.objective == "regression":
            return float(np.mean((y - outputs) ** 2))

        probs = np.clip(outputs, 1e-7, 1 - 1e-7)
        return float(-np.mean(y * np.log(probs) + (1 - y) * np.log(1 - probs)))
