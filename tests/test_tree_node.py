import pytest

from credit_gbdt.models.exceptions import ModelFormatError
from credit_gbdt.models.gbdt_components.tree_node import DecisionTreeNode


def _stump():
    return DecisionTreeNode.make_split(
        0, 2.5,
        DecisionTreeNode.make_leaf(-1.0, depth=1),
        DecisionTreeNode.make_leaf(1.0, depth=1)
    )


def test_leaf_has_no_children():
    leaf = DecisionTreeNode.make_leaf(0.25)
    assert leaf.is_leaf
    assert leaf.left is None and leaf.right is None
    assert leaf.value == 0.25


def test_split_requires_both_children():
    with pytest.raises(ValueError):
        DecisionTreeNode.make_split(0, 1.0, DecisionTreeNode.make_leaf(0.0), None)


def test_routing_sends_equal_values_left():
    stump = _stump()
    assert stump.predict_value([2.5]) == -1.0
    assert stump.predict_value([2.5000001]) == 1.0
    assert stump.predict_value([0.0]) == -1.0


def test_short_row_contributes_zero():
    node = DecisionTreeNode.make_split(
        3, 0.5,
        DecisionTreeNode.make_leaf(-1.0),
        DecisionTreeNode.make_leaf(1.0)
    )
    assert node.predict_value([1.0, 2.0]) == 0.0


def test_missing_child_contributes_zero():
    stump = _stump()
    stump.right = None
    assert stump.predict_value([10.0]) == 0.0


def test_depth_and_node_count():
    root = DecisionTreeNode.make_split(1, 0.0, _stump(), DecisionTreeNode.make_leaf(0.5))
    assert root.get_depth() == 2
    assert root.count_nodes() == 5


def test_depth_and_node_count_of_deep_left_chain():
    node = DecisionTreeNode.make_leaf(0.0, depth=3)
    for depth in (2, 1, 0):
        node = DecisionTreeNode.make_split(0, float(depth), node, DecisionTreeNode.make_leaf(1.0), depth=depth)

    assert node.get_depth() == 3
    assert node.count_nodes() == 7
    assert DecisionTreeNode.make_leaf(0.0).get_depth() == 0
    assert DecisionTreeNode.make_leaf(0.0).count_nodes() == 1


def test_split_with_missing_child_still_counts_one_level():
    stump = _stump()
    stump.right = None
    assert stump.get_depth() == 1
    assert stump.count_nodes() == 2


def test_dict_round_trip_preserves_structure():
    root = DecisionTreeNode.make_split(1, 0.0, _stump(), DecisionTreeNode.make_leaf(0.5))
    restored = DecisionTreeNode.from_dict(root.to_dict())

    assert restored.to_dict() == root.to_dict()
    for row in ([2.0, -1.0], [3.0, -1.0], [0.0, 1.0]):
        assert restored.predict_value(row) == root.predict_value(row)


def test_serialized_split_carries_leaf_flag_and_value():
    payload = _stump().to_dict()
    assert payload['is_leaf'] is False
    assert payload['feature_idx'] == 0
    assert payload['threshold'] == 2.5
    assert payload['left'] == {
        'feature_idx': None, 'threshold': None, 'value': -1.0,
        'is_leaf': True, 'left': None, 'right': None
    }


@pytest.mark.parametrize("payload", [
    None,
    [],
    {'is_leaf': True},
    {'is_leaf': False, 'feature_idx': 0, 'threshold': 1.0, 'left': None, 'right': None},
    {'is_leaf': False, 'feature_idx': 0, 'threshold': 'x',
     'left': {'is_leaf': True, 'value': 0.0}, 'right': {'is_leaf': True, 'value': 0.0}},
])
def test_malformed_payload_raises(payload):
    with pytest.raises(ModelFormatError):
        DecisionTreeNode.from_dict(payload)
