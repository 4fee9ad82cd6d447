import os

import pandas as pd

from credit_gbdt.experiments.compare_models import run_model_comparison


def test_model_comparison_writes_results(tmp_path):
    results = run_model_comparison(
        n_samples=200, num_rounds=3, max_depth=2, output_dir=str(tmp_path), random_state=0
    )

    table = results['table']
    assert table['model'].tolist() == ['GBDT (round)', 'GBDT (node)', 'sklearn GBC']
    assert {'logloss', 'auc', 'accuracy', 'train_time', 'predict_time'} <= set(table.columns)
    assert table['accuracy'].between(0.0, 1.0).all()

    results_dir = results['results_dir']
    assert results_dir.startswith(str(tmp_path))
    saved = pd.read_csv(os.path.join(results_dir, "model_comparison.csv"))
    assert len(saved) == 3

    for name in ("model_comparison.png", "importance_round.png", "training_loss_node.png"):
        assert os.path.exists(os.path.join(results_dir, "figures", name))
    assert os.path.exists(os.path.join(results_dir, "models", "gbdt_node.json"))


def test_model_comparison_without_output():
    results = run_model_comparison(n_samples=120, num_rounds=2, max_depth=2, output_dir=None)
    assert results['results_dir'] is None
    assert len(results['models']) == 3
