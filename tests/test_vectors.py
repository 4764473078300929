import numpy as np
import pytest
from raytrace_renders import vectors


def test_dot_and_cross():
    a = np.array([1.0, 2.0, 3.0])
    b = np.array([4.0, -5.0, 6.0])

    assert vectors.dot(a, b) == pytest.approx(12.0)
    np.testing.assert_allclose(vectors.cross([1, 0, 0], [0, 1, 0]), [0, 0, 1])
    # Cross product is orthogonal to both inputs
    c = vectors.cross(a, b)
    assert vectors.dot(c, a) == pytest.approx(0.0)
    assert vectors.dot(c, b) == pytest.approx(0.0)


def test_add_subtract_scale():
    a = np.array([1.0, 2.0, 3.0])
    b = np.array([0.5, 0.5, 0.5])

    np.testing.assert_allclose(vectors.add(a, b), [1.5, 2.5, 3.5])
    np.testing.assert_allclose(vectors.subtract(a, b), [0.5, 1.5, 2.5])
    np.testing.assert_allclose(vectors.scale(a, -2.0), [-2.0, -4.0, -6.0])


def test_length_and_normalize():
    v = np.array([3.0, 0.0, 4.0])
    assert vectors.length(v) == pytest.approx(5.0)
    np.testing.assert_allclose(vectors.normalize(v), [0.6, 0.0, 0.8])


def test_reflect_about_normal():
    """Reflecting a vector about a normal mirrors its tangential part."""
    normal = np.array([0.0, 1.0, 0.0])
    incoming = np.array([1.0, 1.0, 0.0])
    np.testing.assert_allclose(vectors.reflect(incoming, normal), [-1.0, 1.0, 0.0])

    # A vector along the normal reflects onto itself
    np.testing.assert_allclose(vectors.reflect(normal, normal), normal)


def test_batched_operations():
    """Batches of (N, 3) vectors reduce per row and broadcast against single vectors."""
    batch = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, 3.0]])

    np.testing.assert_allclose(vectors.length(batch), [1.0, 2.0, 3.0])
    np.testing.assert_allclose(vectors.dot(batch, [1.0, 1.0, 1.0]), [1.0, 2.0, 3.0])
    np.testing.assert_allclose(vectors.scale(batch, np.array([2.0, 1.0, 0.5])),
                               [[2.0, 0, 0], [0, 2.0, 0], [0, 0, 1.5]])
    np.testing.assert_allclose(vectors.normalize(batch), np.eye(3))


def test_mismatched_arity_fails_fast():
    with pytest.raises(ValueError):
        vectors.dot([1.0, 2.0], [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        vectors.cross([1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0, 4.0])
    with pytest.raises(ValueError):
        vectors.length([1.0, 2.0])


def test_mismatched_batch_sizes_fail_fast():
    with pytest.raises(ValueError):
        vectors.add(np.zeros((2, 3)), np.zeros((3, 3)))
