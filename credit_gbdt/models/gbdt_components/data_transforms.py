"""
Data Transform Utilities

This module contains the input validation and the numeric link functions
shared by the gradient computer, the trees and the booster.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError


def validate_input_data(
    X,
    y=None,
    n_features: Optional[int] = None
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    入力データの検証と前処理

    Parameters:
    -----------
    X : list of lists, array-like or DataFrame, shape=(n_samples, n_features)
        特徴量行列
    y : list, array-like or Series, shape=(n_samples,), optional
        ラベルベクトル
    n_features : int, optional
        期待される特徴量数（既に学習済みの場合）

    Returns:
    --------
    X_validated : np.ndarray, shape=(n_samples, n_features)
        検証済み特徴量行列
    y_validated : np.ndarray, shape=(n_samples,) or None
        検証済みラベルベクトル

    Raises:
    -------
    InvalidInputError
        X または y が欠落・空・不揃い・長さ不一致の場合
    """
    X = _as_float_array(X, "X")
    if X.ndim != 2:
        raise InvalidInputError(f"X must be a 2D matrix of rows, got {X.ndim}D")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise InvalidInputError(f"X must be non-empty, got shape {X.shape}")

    # 無限値とNaN値のチェック
    if np.any(np.isinf(X)) or np.any(np.isnan(X)):
        raise InvalidInputError("X contains inf or NaN values")

    if n_features is not None and X.shape[1] != n_features:
        raise InvalidInputError(
            f"X has {X.shape[1]} features, but the model expects {n_features}"
        )

    if y is not None:
        y = _as_float_array(y, "y")
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()
        if y.ndim != 1:
            raise InvalidInputError(f"y must be a 1D label vector, got {y.ndim}D")
        if y.shape[0] == 0:
            raise InvalidInputError("y must be non-empty")
        if X.shape[0] != y.shape[0]:
            raise InvalidInputError(
                f"X ({X.shape[0]} samples) and y ({y.shape[0]} samples) have different numbers of samples"
            )
        if np.any(np.isnan(y)):
            raise InvalidInputError("y contains NaN values")

    return X, y


def _as_float_array(data, name: str) -> np.ndarray:
    if data is None:
        raise InvalidInputError(f"{name} is required")

    if isinstance(data, (pd.DataFrame, pd.Series)):
        data = data.to_numpy()
    elif not isinstance(data, (list, tuple, np.ndarray)):
        raise InvalidInputError(
            f"{name} must be a sequence, got {type(data).__name__}"
        )

    try:
        return np.array(data, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        # ragged rows or non-numeric cells
        raise InvalidInputError(f"{name} must be a rectangular numeric array: {exc}") from exc


def sigmoid(x):
    """Logistic link, clipped to keep exp() finite."""
    return 1.0 / (1.0 + np.exp(-np.clip(x, -500, 500)))


def clamp_unit(x):
    """Clamp to the closed unit interval."""
    return np.clip(x, 0.0, 1.0)
