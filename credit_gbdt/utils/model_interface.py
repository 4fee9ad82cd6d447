"""
モデルインターフェース確認用モジュール

このモジュールは、学習済みモデルの特徴量重要度を表形式で返す関数と、
fit / predict / evaluate の共通インターフェースを合成データで確認する
ユーティリティを提供します。
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from ..data.synthetic import generate_credit_data
from ..models.base import GBMBase
from ..models.booster import GBDT

logger = logging.getLogger(__name__)


def ranked_feature_importance(model: GBDT, feature_names: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    特徴量重要度を降順に並べた表

    Parameters:
    -----------
    model : GBDT
        学習済みモデル
    feature_names : sequence of str, optional
        特徴量名（省略時はモデルの feature_names、なければ feature_i）

    Returns:
    --------
    table : pd.DataFrame
        'feature' と 'importance'（%）の2列、重要度の降順
    """
    importance = model.feature_importance()

    if feature_names is None:
        feature_names = model.feature_names
    if feature_names is None:
        feature_names = [f"feature_{i}" for i in range(len(importance))]
    if len(feature_names) != len(importance):
        raise ValueError(
            f"Got {len(feature_names)} feature names for {len(importance)} importance values"
        )

    table = pd.DataFrame({'feature': list(feature_names), 'importance': importance})
    return table.sort_values('importance', ascending=False, kind='stable').reset_index(drop=True)


def check_model_interface(model_class=GBDT,
                          model_params: Optional[Dict[str, Any]] = None,
                          n_samples: int = 300,
                          random_state: int = 42) -> Dict[str, Any]:
    """
    モデルのインターフェースを合成データで確認

    Parameters:
    -----------
    model_class : class
        GBMBase を継承したモデルクラス
    model_params : dict, optional
        モデルのパラメータ
    n_samples : int, default=300
        サンプル数
    random_state : int, default=42
        乱数シード

    Returns:
    --------
    results : dict
        学習・予測時間と評価結果
    """
    if model_params is None:
        model_params = {
            'num_rounds': 20,
            'learning_rate': 0.3,
            'max_depth': 3
        }

    X_train, y_train, X_test, y_test = generate_credit_data(
        n_samples=n_samples,
        random_state=random_state
    )

    model = model_class(**model_params)
    if not isinstance(model, GBMBase):
        raise TypeError(f"{model_class.__name__} does not implement GBMBase")

    # 学習時間を計測
    start_time = time.time()
    model.fit(X_train, y_train)
    train_time = time.time() - start_time

    # 予測時間を計測
    start_time = time.time()
    model.predict(X_test)
    predict_time = time.time() - start_time

    eval_results = model.evaluate(X_test, y_test, metrics=['logloss', 'auc', 'accuracy'])
    logger.info(
        "%s: train %.3fs, predict %.3fs, %s",
        model_class.__name__, train_time, predict_time, eval_results
    )

    return {
        'model_class': model_class.__name__,
        'train_time': train_time,
        'predict_time': predict_time,
        'evaluation': eval_results
    }
