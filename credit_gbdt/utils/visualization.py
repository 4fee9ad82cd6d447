"""
実験結果の保存・可視化ユーティリティモジュール

このモジュールは、学習済みモデルの特徴量重要度や学習曲線を可視化し、
実験設定を保存するためのユーティリティ関数を提供します。
"""

import datetime
import json
import os
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt
import seaborn as sns

from ..models.booster import GBDT
from .model_interface import ranked_feature_importance


def create_results_directory(base_dir: str = "results") -> str:
    """
    実験結果を保存するディレクトリを作成

    Parameters:
    -----------
    base_dir : str, default="results"
        基本ディレクトリ名

    Returns:
    --------
    results_dir : str
        作成された結果ディレクトリのパス
    """
    # タイムスタンプを含むディレクトリ名を生成
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    results_dir = os.path.join(base_dir, f"experiment_{timestamp}")

    os.makedirs(os.path.join(results_dir, "figures"), exist_ok=True)
    os.makedirs(os.path.join(results_dir, "models"), exist_ok=True)

    return results_dir


def save_experiment_config(config: Dict, results_dir: str) -> str:
    """
    実験設定をJSONファイルに保存

    Returns:
    --------
    path : str
        保存したファイルのパス
    """
    path = os.path.join(results_dir, "experiment_config.json")
    with open(path, 'w') as f:
        json.dump(config, f, indent=2)
    return path


def plot_feature_importance(model: GBDT,
                            feature_names: Optional[Sequence[str]] = None,
                            title: str = "Feature Importance (% of splits)",
                            save_path: Optional[str] = None) -> None:
    """
    特徴量重要度を横棒グラフでプロット

    Parameters:
    -----------
    model : GBDT
        学習済みモデル
    feature_names : sequence of str, optional
        特徴量名
    title : str
        プロットのタイトル
    save_path : str, optional
        保存先のパス
    """
    table = ranked_feature_importance(model, feature_names)

    fig, ax = plt.subplots(figsize=(8, max(3, 0.5 * len(table))))
    sns.barplot(data=table, x='importance', y='feature', ax=ax, color='steelblue')
    ax.set_title(title)
    ax.set_xlabel('Importance (%)')
    ax.set_ylabel('')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    plt.close(fig)


def plot_training_loss(model: GBDT,
                       title: str = "Training Loss per Boosting Round",
                       save_path: Optional[str] = None) -> None:
    """
    ラウンドごとの学習損失をプロット

    Parameters:
    -----------
    model : GBDT
        学習済みモデル（train_loss_history_ を使用）
    title : str
        プロットのタイトル
    save_path : str, optional
        保存先のパス
    """
    history = model.train_loss_history_
    if not history:
        raise ValueError("Model has no training history to plot")

    loss_name = 'Log loss' if model.objective == 'binary' else 'MSE'

    fig, ax = plt.subplots(figsize=(8, 5))
    sns.lineplot(x=list(range(1, len(history) + 1)), y=history, ax=ax)
    ax.set_title(title)
    ax.set_xlabel('Round')
    ax.set_ylabel(loss_name)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    plt.close(fig)
