"""
GBDT Core Module

This module contains the main GBDT class that orchestrates the gradient
computer and the gradient trees into a boosted credit-scoring model.
"""

import json
import numbers
import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .base import GBMBase
from .exceptions import InvalidInputError, ModelFormatError
from .gbdt_components.gradient_computer import GradientComputer, OBJECTIVES
from .gbdt_components.gradient_tree import GradientTree
from .gbdt_components.tree_builder import TreeBuilder, SORT_SCOPES

logger = logging.getLogger(__name__)


class GBDT(GBMBase):
    """
    Gradient Boosting Decision Trees for credit scoring

    Every call to ``fit`` continues training: new trees are appended to the
    ones already in the ensemble. Use ``reset`` for a fresh start.
    """

    def __init__(self,
                 learning_rate: float = 0.3,
                 max_depth: int = 4,
                 min_child_weight: float = 1.0,
                 num_rounds: int = 100,
                 objective: str = "binary",
                 sort_scope: str = "round",
                 feature_names: Optional[Sequence[str]] = None,
                 verbose: bool = False):
        """
        Initialize GBDT

        Parameters:
        -----------
        learning_rate : float
            Shrinkage applied to every tree's leaf values
        max_depth : int
            Maximum depth of each tree
        min_child_weight : float
            Nodes with fewer rows than this become leaves
        num_rounds : int
            Number of boosting rounds per ``fit`` call
        objective : str
            "binary" (logistic output) or "regression" (clamped output)
        sort_scope : str
            "round" reuses the per-round sorted order at every depth,
            "node" re-sorts each node's own rows
        feature_names : sequence of str, optional
            Fixes the feature count up front and labels importance output
        verbose : bool
            Log every boosting round at INFO instead of DEBUG
        """
        super().__init__(
            num_rounds=num_rounds,
            learning_rate=learning_rate,
            max_depth=max_depth
        )

        self.min_child_weight = min_child_weight
        self.objective = objective
        self.sort_scope = sort_scope
        self.feature_names = list(feature_names) if feature_names is not None else None
        self.verbose = verbose

        # Initialize storage
        self.trees: List[GradientTree] = []
        self.y_ = None
        self.train_loss_history_: List[float] = []

        self._check_params()
        if self.feature_names is not None:
            self.n_features_ = len(self.feature_names)

    @property
    def gradient_computer(self) -> GradientComputer:
        return GradientComputer(objective=self.objective)

    def fit(self, X, y) -> 'GBDT':
        """
        Continue training with ``num_rounds`` more trees

        Parameters:
        -----------
        X : array-like or DataFrame, shape=(n_samples, n_features)
            Training features
        y : array-like or Series, shape=(n_samples,)
            Labels (0/1 for binary, real-valued for regression)

        Returns:
        --------
        self : GBDT
            Fitted model

        Raises:
        -------
        InvalidInputError
            If X or y is missing, empty, ragged or misaligned. The model is
            left untouched.
        """
        if y is None:
            raise InvalidInputError("y is required for training")
        X, y = self._validate_input(X, y)

        gradient_computer = self.gradient_computer
        self.y_ = y
        self.n_features_ = X.shape[1]

        n_samples = X.shape[0]
        predictions = np.full(n_samples, gradient_computer.compute_initial_prediction(y))

        log_round = logger.info if self.verbose else logger.debug
        n_trees_before = len(self.trees)
        iteration = 0

        try:
            for iteration in range(self.num_rounds):
                gradients = gradient_computer.compute_gradients(y, predictions)

                # sorted order always covers every training row
                sorted_indices = TreeBuilder.compute_sorted_indices(X)

                tree = GradientTree(
                    max_depth=self.max_depth,
                    min_child_weight=self.min_child_weight,
                    sort_scope=self.sort_scope
                ).fit(X, gradients, sorted_indices)

                if tree.root is None:
                    logger.warning("Round %d produced no tree, skipping", iteration)
                    continue

                self.trees.append(tree)
                predictions = predictions + self.learning_rate * tree.predict(X)

                loss = gradient_computer.compute_loss(y, predictions)
                self.train_loss_history_.append(loss)
                log_round(
                    "Round %d/%d: %d nodes, train loss %.6f",
                    iteration + 1, self.num_rounds, tree.root.count_nodes(), loss
                )
        except Exception:
            logger.exception(
                "Boosting aborted in round %d, keeping %d trees from completed rounds",
                iteration, len(self.trees)
            )
            raise

        logger.info(
            "Fit on %d rows x %d features added %d trees (%d total, objective=%s)",
            n_samples, self.n_features_, len(self.trees) - n_trees_before,
            len(self.trees), self.objective
        )
        return self

    def reset(self) -> 'GBDT':
        """
        Discard every tree and the remembered labels
        """
        self.trees = []
        self.y_ = None
        self.train_loss_history_ = []
        self.n_features_ = len(self.feature_names) if self.feature_names is not None else None
        return self

    def base_value(self) -> float:
        """Raw starting prediction: mean of the last labels (regression) or 0.5 (binary)"""
        return self.gradient_computer.compute_initial_prediction(self.y_)

    def predict_single(self, row: Sequence[float]) -> float:
        """
        Predict one row

        Parameters:
        -----------
        row : sequence of float
            Feature values in training column order

        Returns:
        --------
        prediction : float
            sigmoid (binary) or clamped (regression) score in [0, 1]
        """
        gradient_computer = self.gradient_computer
        return self._predict_row(row, gradient_computer, gradient_computer.compute_initial_prediction(self.y_))

    def predict_batch(self, rows) -> List[float]:
        """
        Predict every row independently, preserving order
        """
        if isinstance(rows, pd.DataFrame):
            rows = rows.to_numpy()

        # one base value per batch
        gradient_computer = self.gradient_computer
        base = gradient_computer.compute_initial_prediction(self.y_)
        return [self._predict_row(row, gradient_computer, base) for row in rows]

    def _predict_row(self, row, gradient_computer: GradientComputer, base: float) -> float:
        if isinstance(row, pd.Series):
            row = row.to_numpy()

        prediction = base
        for tree in self.trees:
            prediction += self.learning_rate * tree.predict_value(row)

        return float(gradient_computer.transform(prediction))

    def predict(self, X) -> np.ndarray:
        """
        Predict a feature matrix

        Parameters:
        -----------
        X : array-like or DataFrame, shape=(n_samples, n_features)
            Input features

        Returns:
        --------
        predictions : array-like, shape=(n_samples,)
            Scores in [0, 1]
        """
        X, _ = self._validate_input(X)
        return np.array(self.predict_batch(X), dtype=np.float64)

    def feature_importance(self) -> np.ndarray:
        """
        Split-count feature importance in percent

        Returns:
        --------
        importance : array-like, shape=(n_features,)
            Share of split nodes using each feature, summing to 100 when any
            split exists and all zeros otherwise
        """
        n_features = self.n_features_
        if n_features is None:
            n_features = max((tree.max_feature_index() for tree in self.trees), default=-1) + 1

        counts = np.zeros(n_features)
        for tree in self.trees:
            tree.count_feature_splits(counts)

        total = np.sum(counts)
        if total > 0:
            return counts / total * 100.0
        return counts

    def _default_metrics(self) -> List[str]:
        if self.objective == "regression":
            return ['mse']
        return ['logloss']

    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update({
            'min_child_weight': self.min_child_weight,
            'objective': self.objective,
            'sort_scope': self.sort_scope,
            'feature_names': self.feature_names,
            'verbose': self.verbose
        })
        return params

    def set_params(self, **params) -> 'GBDT':
        super().set_params(**params)
        if 'feature_names' in params and self.feature_names is not None:
            self.feature_names = list(self.feature_names)
            self.n_features_ = len(self.feature_names)
        return self

    def _check_params(self) -> None:
        super()._check_params()
        if not isinstance(self.min_child_weight, numbers.Real) or self.min_child_weight < 0:
            raise ValueError(f"min_child_weight must be a non-negative number, got {self.min_child_weight!r}")
        if self.objective not in OBJECTIVES:
            raise ValueError(f"objective must be one of {OBJECTIVES}, got {self.objective!r}")
        if self.sort_scope not in SORT_SCOPES:
            raise ValueError(f"sort_scope must be one of {SORT_SCOPES}, got {self.sort_scope!r}")
        if self.feature_names is not None:
            if len(self.feature_names) == 0 or not all(isinstance(name, str) for name in self.feature_names):
                raise ValueError("feature_names must be a non-empty sequence of strings")
            if self.trees and self.n_features_ is not None and len(self.feature_names) != self.n_features_:
                raise ValueError(
                    f"feature_names has {len(self.feature_names)} entries, but the model was trained on {self.n_features_} features"
                )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable model: every tree plus the training configuration

        Labels and the feature count are not included.
        """
        return {
            'trees': [tree.to_dict() for tree in self.trees],
            'params': {
                'learning_rate': self.learning_rate,
                'max_depth': self.max_depth,
                'min_child_weight': self.min_child_weight,
                'num_rounds': self.num_rounds,
                'objective': self.objective,
                'sort_scope': self.sort_scope,
                'feature_names': self.feature_names
            }
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], labels=None) -> 'GBDT':
        """
        Restore a model produced by ``to_dict``

        Parameters:
        -----------
        payload : dict
            Output of ``to_dict``
        labels : array-like, optional
            Training labels to resupply; without them a regression model
            predicts from a base value of 0.0

        Raises:
        -------
        ModelFormatError
            If the payload is malformed
        """
        if not isinstance(payload, dict):
            raise ModelFormatError(f"Model payload must be a mapping, got {type(payload).__name__}")

        params = payload.get('params')
        trees = payload.get('trees')
        if not isinstance(params, dict) or not isinstance(trees, list):
            raise ModelFormatError("Model payload needs a 'params' mapping and a 'trees' list")

        try:
            model = cls(**params)
        except (TypeError, ValueError) as exc:
            raise ModelFormatError(f"Invalid model parameters: {exc}") from exc

        model.trees = [
            GradientTree.from_dict(
                tree,
                max_depth=model.max_depth,
                min_child_weight=model.min_child_weight,
                sort_scope=model.sort_scope
            )
            for tree in trees
        ]

        if labels is not None:
            y = np.asarray(labels, dtype=np.float64).ravel()
            if y.shape[0] == 0:
                raise InvalidInputError("labels must be non-empty")
            model.y_ = y

        return model

    def save_json(self, file_path: str) -> None:
        """
        Save the model to a JSON file
        """
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)

        logger.info("Saved %d trees to %s", len(self.trees), file_path)

    @classmethod
    def load_json(cls, file_path: str, labels=None) -> 'GBDT':
        """
        Load a model saved with ``save_json``
        """
        with open(file_path, 'r') as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as exc:
                raise ModelFormatError(f"{file_path} is not valid JSON: {exc}") from exc

        model = cls.from_dict(payload, labels=labels)
        logger.info("Loaded %d trees from %s", len(model.trees), file_path)
        return model

    def get_info(self) -> Dict[str, Any]:
        """
        Model structure and configuration summary
        """
        node_counts = [tree.root.count_nodes() for tree in self.trees if tree.root is not None]
        depths = [tree.root.get_depth() for tree in self.trees if tree.root is not None]

        info = self.get_params()
        info.update({
            'n_trees': len(self.trees),
            'n_features': self.n_features_,
            'n_nodes': int(np.sum(node_counts)) if node_counts else 0,
            'mean_depth': float(np.mean(depths)) if depths else 0.0,
            'final_train_loss': self.train_loss_history_[-1] if self.train_loss_history_ else None
        })
        return info

    def print_training_summary(self) -> None:
        """
        Print training summary
        """
        info = self.get_info()
        print(f"\n=== GBDT Training Summary ===")
        print(f"Objective: {self.objective}")
        print(f"Trees: {info['n_trees']}")
        print(f"Features: {info['n_features']}")
        print(f"Learning rate: {self.learning_rate}")
        print(f"Max depth: {self.max_depth}")
        print(f"Total nodes: {info['n_nodes']}")
        print(f"Mean tree depth: {info['mean_depth']:.2f}")

        if info['final_train_loss'] is not None:
            print(f"Final training loss: {info['final_train_loss']:.6f}")

        importance = self.feature_importance()
        if np.sum(importance) > 0:
            names = self.feature_names or [f"feature_{i}" for i in range(len(importance))]
            print("Feature importance (% of splits):")
            for name, share in sorted(zip(names, importance), key=lambda item: -item[1]):
                print(f"  {name}: {share:.2f}")

    def __repr__(self) -> str:
        return (
            f"GBDT(objective={self.objective!r}, num_rounds={self.num_rounds}, "
            f"learning_rate={self.learning_rate}, max_depth={self.max_depth}, trees={len(self.trees)})"
        )
