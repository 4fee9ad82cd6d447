import json
import os

import numpy as np
import pytest

from credit_gbdt import GBDT
from credit_gbdt.data.business_credit import FEATURE_NAMES
from credit_gbdt.utils import (
    check_model_interface,
    create_results_directory,
    plot_feature_importance,
    plot_training_loss,
    ranked_feature_importance,
    save_experiment_config
)


@pytest.fixture
def trained(credit_data):
    X_train, y_train, _, _ = credit_data
    return GBDT(num_rounds=5, max_depth=3, feature_names=FEATURE_NAMES).fit(X_train, y_train)


class TestRankedImportance:

    def test_sorted_descending_with_model_names(self, trained):
        table = ranked_feature_importance(trained)

        assert list(table.columns) == ['feature', 'importance']
        assert sorted(table['feature']) == sorted(FEATURE_NAMES)
        assert table['importance'].is_monotonic_decreasing
        assert table['importance'].sum() == pytest.approx(100.0, abs=1e-6)

    def test_default_names(self, step_data):
        X, y = step_data
        table = ranked_feature_importance(GBDT(num_rounds=2).fit(X, y))
        assert table['feature'].tolist() == ['feature_0']

    def test_name_count_mismatch(self, trained):
        with pytest.raises(ValueError):
            ranked_feature_importance(trained, feature_names=['a', 'b'])


class TestResultFiles:

    def test_results_directory_layout(self, tmp_path):
        results_dir = create_results_directory(str(tmp_path))
        assert os.path.isdir(os.path.join(results_dir, "figures"))
        assert os.path.isdir(os.path.join(results_dir, "models"))

    def test_config_is_saved_as_json(self, tmp_path):
        path = save_experiment_config({'num_rounds': 3}, str(tmp_path))
        with open(path) as f:
            assert json.load(f) == {'num_rounds': 3}

    def test_plots_are_written(self, trained, tmp_path):
        importance_path = tmp_path / "importance.png"
        loss_path = tmp_path / "loss.png"

        plot_feature_importance(trained, save_path=str(importance_path))
        plot_training_loss(trained, save_path=str(loss_path))

        assert importance_path.stat().st_size > 0
        assert loss_path.stat().st_size > 0

    def test_loss_plot_needs_history(self):
        with pytest.raises(ValueError):
            plot_training_loss(GBDT())


class TestModelInterface:

    def test_gbdt_interface(self):
        results = check_model_interface(n_samples=120, model_params={'num_rounds': 3, 'max_depth': 2})

        assert results['model_class'] == 'GBDT'
        assert results['train_time'] >= 0
        assert set(results['evaluation']) == {'logloss', 'auc', 'accuracy'}
        assert np.isfinite(results['evaluation']['logloss'])

    def test_rejects_non_gbm_models(self):
        with pytest.raises(TypeError):
            check_model_interface(model_class=dict, model_params={})
