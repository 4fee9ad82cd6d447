"""
GBM基底クラスモジュール

このモジュールは、与信スコアリング用の勾配ブースティングモデルの
抽象基底クラスを提供します。パラメータ管理と評価指標の計算は
すべての実装で共通です。
"""

from abc import ABC, abstractmethod
import numbers
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from sklearn.metrics import log_loss, roc_auc_score

from .gbdt_components.data_transforms import validate_input_data

# 0/1 ラベルでのみ定義される評価指標
BINARY_METRICS = ('logloss', 'auc', 'accuracy')


class GBMBase(ABC):
    """
    勾配ブースティングモデルの抽象基底クラス

    Attributes:
    -----------
    num_rounds : int
        ブースティング反復回数（木の数）
    learning_rate : float
        学習率（各木の寄与度）
    max_depth : int
        各木の最大深さ
    n_features_ : int or None
        学習時に確定した特徴量数
    """

    def __init__(self,
                 num_rounds: int = 100,
                 learning_rate: float = 0.3,
                 max_depth: int = 4):
        self.num_rounds = num_rounds
        self.learning_rate = learning_rate
        self.max_depth = max_depth
        self.n_features_ = None

    @abstractmethod
    def fit(self, X, y) -> 'GBMBase':
        """
        モデルを学習

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        y : array-like, shape=(n_samples,)
            ラベル

        Returns:
        --------
        self : GBMBase
            学習済みモデル
        """
        pass

    @abstractmethod
    def predict(self, X) -> np.ndarray:
        """
        学習済みモデルで予測

        Returns:
        --------
        y_pred : array-like, shape=(n_samples,)
            [0, 1] の予測値
        """
        pass

    def _validate_input(self, X, y=None) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """
        入力データの検証と前処理（特徴量数は学習済みなら固定）
        """
        return validate_input_data(X, y, n_features=self.n_features_)

    def evaluate(self, X, y, metrics: Optional[List[str]] = None) -> Dict[str, float]:
        """
        モデルの評価

        Parameters:
        -----------
        X : array-like, shape=(n_samples, n_features)
            入力特徴量
        y : array-like, shape=(n_samples,)
            真のラベル
        metrics : list of str, optional
            mse, rmse, mae, logloss, auc, accuracy から選択
            （省略時は _default_metrics()）。logloss, auc, accuracy は 0/1 ラベル専用

        Returns:
        --------
        results : dict
            評価指標ごとの値

        Raises:
        -------
        ValueError
            未知の評価指標、または 0/1 以外のラベルに二値分類の指標を指定した場合
        """
        if metrics is None:
            metrics = self._default_metrics()

        X, y = self._validate_input(X, y)
        y_pred = self.predict(X)
        is_binary = bool(np.all((y == 0) | (y == 1)))

        results = {}
        for metric in metrics:
            name = metric.lower()
            if name in BINARY_METRICS and not is_binary:
                raise ValueError(f"Metric '{metric}' needs 0/1 labels")

            if name == 'mse':
                results['mse'] = float(np.mean((y - y_pred) ** 2))

            elif name == 'rmse':
                results['rmse'] = float(np.sqrt(np.mean((y - y_pred) ** 2)))

            elif name == 'mae':
                results['mae'] = float(np.mean(np.abs(y - y_pred)))

            elif name == 'logloss':
                results['logloss'] = float(log_loss(y, np.clip(y_pred, 1e-7, 1 - 1e-7), labels=[0, 1]))

            elif name == 'auc':
                # 単一クラスでは定義されない
                if len(np.unique(y)) < 2:
                    results['auc'] = float('nan')
                else:
                    results['auc'] = float(roc_auc_score(y, y_pred))

            elif name == 'accuracy':
                results['accuracy'] = float(np.mean((y_pred >= 0.5) == (y >= 0.5)))

            else:
                raise ValueError(f"Unknown metric: {metric}")

        return results

    def _default_metrics(self) -> List[str]:
        """evaluate で metrics 省略時に使う指標"""
        return ['logloss']

    def get_params(self) -> Dict[str, Any]:
        """
        モデルパラメータの取得
        """
        return {
            'num_rounds': self.num_rounds,
            'learning_rate': self.learning_rate,
            'max_depth': self.max_depth
        }

    def set_params(self, **params) -> 'GBMBase':
        """
        モデルパラメータの設定

        Raises:
        -------
        ValueError
            未知のパラメータ名の場合
        """
        valid = self.get_params()
        for key in params:
            if key not in valid:
                raise ValueError(f"Invalid parameter: {key}")

        previous = {key: getattr(self, key) for key in params}
        for key, value in params.items():
            setattr(self, key, value)

        try:
            self._check_params()
        except ValueError:
            for key, value in previous.items():
                setattr(self, key, value)
            raise
        return self

    def _check_params(self) -> None:
        """パラメータ値の検証（サブクラスで拡張）"""
        if not isinstance(self.num_rounds, (int, np.integer)) or self.num_rounds < 0:
            raise ValueError(f"num_rounds must be a non-negative integer, got {self.num_rounds!r}")
        if not isinstance(self.max_depth, (int, np.integer)) or self.max_depth < 0:
            raise ValueError(f"max_depth must be a non-negative integer, got {self.max_depth!r}")
        if not isinstance(self.learning_rate, numbers.Real) or not np.isfinite(self.learning_rate):
            raise ValueError(f"learning_rate must be a finite number, got {self.learning_rate!r}")
