import os
import sys
import numpy as np
import pytest

# Add the src directory to Python path to import local dok_matrix
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dok_matrix import (
    DoKMatrixBuilder,
    DoKConfig,
    DenseVector,
    SparseVector,
    DoKArgumentError,
    NegativeIndexError,
    InvalidLoadFactorError,
    InvalidGrowthFactorError,
)


def test_builder_writes_row_by_row():
    builder = DoKMatrixBuilder(16)
    builder.next_column(0, 1.0).next_column(3, 2.0).next_row()
    builder.next_row()
    builder.next_column(1, -1.0).next_column(2, 0.0)
    m = builder.build_matrix()

    assert m.nnz == 3
    assert m.shape == (3, 4)
    np.testing.assert_array_equal(m.to_row_major_matrix().toarray(),
                                  [[1.0, 0.0, 0.0, 2.0],
                                   [0.0, 0.0, 0.0, 0.0],
                                   [0.0, -1.0, 0.0, 0.0]])


def test_builder_parses_features():
    builder = DoKMatrixBuilder()
    builder.next_column_from_string("2:0.5").next_column_from_string("4")
    m = builder.build_matrix()
    assert m.get(0, 2) == 0.5
    assert m.get(0, 4) == 1.0

    with pytest.raises(DoKArgumentError):
        builder.next_column_from_string("a:1")
    with pytest.raises(DoKArgumentError):
        builder.next_column_from_string("1:b")


def test_builder_rejects_negative_columns():
    with pytest.raises(NegativeIndexError):
        DoKMatrixBuilder().next_column(-1, 1.0)


def test_dense_vector():
    v = DenseVector(4)
    v.set(2, 1.5)
    assert len(v) == 4
    assert v.size() == 4
    assert v.get(2) == 1.5
    assert v.get(10, -1.0) == -1.0
    v.clear()
    np.testing.assert_array_equal(v.to_array(), np.zeros(4, dtype=np.float32))


def test_sparse_vector_drops_zeros():
    v = SparseVector()
    v.set(3, 2.0)
    v[1] = 4.0
    v.set(3, 0.0)
    assert len(v) == 1
    assert v.nnz() == 1
    assert 3 not in v
    assert v[1] == 4.0
    assert v[3] == 0.0
    np.testing.assert_array_equal(v.to_array(), [0.0, 4.0])
    np.testing.assert_array_equal(v.to_array(4), [0.0, 4.0, 0.0, 0.0])
    assert repr(v) == "SparseVector({1: 4.0})"
    v.clear()
    assert repr(v) == "SparseVector({})"


def test_config_validation():
    DoKConfig().validate()
    with pytest.raises(InvalidLoadFactorError):
        DoKConfig(load_factor=1.0).validate()
    with pytest.raises(InvalidGrowthFactorError):
        DoKConfig(growth_factor=0.5).validate()
    with pytest.raises(DoKArgumentError):
        DoKConfig(min_initial_capacity=-1).validate()
