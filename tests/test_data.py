import numpy as np
import pandas as pd
import pytest

from credit_gbdt.data import (
    FEATURE_NAMES,
    generate_credit_data,
    label_by_thresholds,
    load_reference_scenarios,
    load_reference_training_set,
    meets_thresholds,
    normalize_features,
    probability_to_credit_score,
    threshold_score
)

ALL_MET = [1.0, 0.8, 0.78, 0.5, 2, 7, 6, 0.65]
NONE_MET = [0.9, 1.4, 0.77, 0.49, 1, 8, 7, 0.66]


class TestThresholds:

    def test_edges_are_inclusive(self):
        assert meets_thresholds([ALL_MET]).all()
        assert not meets_thresholds([NONE_MET]).any()

    def test_seven_of_eight_is_good(self):
        row = list(ALL_MET)
        row[3] = 0.1
        assert label_by_thresholds([row, NONE_MET]).tolist() == [1, 0]

        row[7] = 0.9
        assert label_by_thresholds([row]).tolist() == [0]

    def test_threshold_score(self):
        np.testing.assert_allclose(threshold_score([ALL_MET, NONE_MET]), [1.0, 0.0])

    def test_wrong_width(self):
        with pytest.raises(ValueError):
            meets_thresholds([[1.0, 2.0]])


class TestReferenceData:

    def test_training_set(self):
        X, y = load_reference_training_set()

        assert X.shape == (25, 8)
        assert list(X.columns) == FEATURE_NAMES
        assert y.name == 'good_credit'
        assert y.iloc[0] == 1
        assert y.iloc[2] == 0
        assert set(y.unique()) == {0, 1}

    def test_scenarios_agree_with_threshold_rule(self):
        scenarios = load_reference_scenarios()

        assert len(scenarios) == 10
        labels = label_by_thresholds(scenarios[FEATURE_NAMES].to_numpy())
        expected = (scenarios['expected_outcome'] == 'good').astype(int).to_numpy()
        np.testing.assert_array_equal(labels, expected)


class TestScoring:

    def test_credit_score_scale(self):
        assert probability_to_credit_score(0.5) == 575
        assert probability_to_credit_score(0.0) == 301
        assert probability_to_credit_score(1.0) == 849
        assert probability_to_credit_score(3.0) == probability_to_credit_score(1.0)

    def test_credit_score_is_monotonic(self):
        scores = [probability_to_credit_score(p) for p in np.linspace(0, 1, 21)]
        assert scores == sorted(scores)

    def test_normalize_features(self):
        normalized = normalize_features([[100.0, -1.0, 0.5, 2.5, 7.5, 5.0, 6.0, 0.25]])
        np.testing.assert_allclose(normalized, [[1.0, 0.0, 0.5, 0.5, 0.5, 0.5, 0.5, 0.25]])


class TestSyntheticData:

    def test_split_shapes(self):
        X_train, y_train, X_test, y_test = generate_credit_data(n_samples=200, test_size=0.25, random_state=0)

        assert X_train.shape == (150, 8)
        assert X_test.shape == (50, 8)
        assert len(y_train) == 150 and len(y_test) == 50
        assert list(X_train.columns) == FEATURE_NAMES
        assert set(np.unique(y_train)) <= {0, 1}

    def test_seed_is_reproducible(self):
        first = generate_credit_data(n_samples=50, random_state=11)
        second = generate_credit_data(n_samples=50, random_state=11)
        pd.testing.assert_frame_equal(first[0], second[0])
        pd.testing.assert_series_equal(first[1], second[1])

    def test_labels_follow_rule_without_noise(self):
        X_train, y_train, _, _ = generate_credit_data(n_samples=100, random_state=5)
        np.testing.assert_array_equal(y_train.to_numpy(), label_by_thresholds(X_train.to_numpy()))

    def test_regression_target(self):
        _, y_train, _, _ = generate_credit_data(n_samples=80, objective="regression", random_state=2)
        assert y_train.between(0.0, 1.0).all()

    @pytest.mark.parametrize("test_size", [-0.1, 1.0])
    def test_bad_test_size(self, test_size):
        with pytest.raises(ValueError):
            generate_credit_data(test_size=test_size)
