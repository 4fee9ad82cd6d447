import numpy as np
import pytest

from credit_gbdt.models.exceptions import ModelFormatError
from credit_gbdt.models.gbdt_components.gradient_tree import GradientTree


@pytest.fixture
def stump():
    X = np.array([[0.0, 1.0], [0.0, 2.0], [0.0, 3.0], [0.0, 4.0]])
    return GradientTree(max_depth=1).fit(X, np.array([-1.0, -1.0, 1.0, 2.0]))


def test_tree_is_built_once(stump):
    with pytest.raises(RuntimeError):
        stump.fit(np.array([[1.0, 1.0], [2.0, 2.0]]), np.array([1.0, -1.0]))


def test_split_counts_and_highest_feature(stump):
    counts = stump.count_feature_splits(np.zeros(2))
    np.testing.assert_array_equal(counts, [0.0, 1.0])
    assert stump.max_feature_index() == 1

    # indices past the counter are ignored
    np.testing.assert_array_equal(stump.count_feature_splits(np.zeros(1)), [0.0])


def test_unfitted_tree_predicts_zero():
    tree = GradientTree()
    assert tree.predict_value([1.0]) == 0.0
    assert tree.max_feature_index() == -1
    assert str(tree) == "GradientTree(not fitted)"


def test_predict_matches_row_walk(stump):
    X = np.array([[0.0, 1.0], [5.0, 4.0]])
    np.testing.assert_allclose(stump.predict(X), [stump.predict_value(row) for row in X])
    assert stump.get_info()['n_nodes'] == 3


def test_dict_round_trip(stump):
    restored = GradientTree.from_dict(stump.to_dict())
    assert restored.is_fitted
    assert restored.to_dict() == stump.to_dict()


def test_payload_needs_root():
    with pytest.raises(ModelFormatError):
        GradientTree.from_dict({'nodes': []})
