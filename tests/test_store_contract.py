import pytest

from flagstore import DenseBoundedStore, DenseUnboundedStore, SparseStore, InvalidFlagIndex
from models.variants import StoreVariant

def make_stores():
    return [DenseBoundedStore(256, 64), DenseUnboundedStore(), SparseStore()]

@pytest.fixture(params=['bounded', 'unbounded', 'sparse'])
def store(request):
    return {'bounded': DenseBoundedStore(256, 64),
            'unbounded': DenseUnboundedStore(),
            'sparse': SparseStore()}[request.param]

def test_new_store_is_empty(store):
    for index in (0, 1, 63, 64, 65, 200, 255):
        assert store.test(index) is False
    assert len(store) == 0
    assert not store
    assert store.indices() == []

def test_set_then_test(store):
    store.set(5)
    store.set(5)
    assert store.test(5) is True
    assert len(store) == 1

def test_clear_then_test(store):
    store.set(5)
    store.clear(5)
    store.clear(5)
    assert store.test(5) is False
    assert len(store) == 0

def test_clear_never_set_is_noop(store):
    store.clear(12)
    assert store.test(12) is False
    assert len(store) == 0

def test_toggle_twice_restores_state(store):
    assert store.toggle(9) is True
    assert store.test(9) is True
    assert store.toggle(9) is False
    assert store.test(9) is False

    store.set(10)
    store.toggle(10)
    store.toggle(10)
    assert store.test(10) is True
    assert len(store) == 1

def test_no_cross_index_interference_across_word_boundary(store):
    store.set(63)
    store.set(64)
    store.clear(63)
    assert store.test(64) is True
    assert store.test(63) is False
    assert store.test(65) is False

def test_iteration_is_ascending(store):
    for index in (200, 3, 64, 63, 0):
        store.set(index)
    assert list(store) == [0, 3, 63, 64, 200]
    assert 64 in store
    assert 65 not in store
    assert -1 not in store
    assert 'a' not in store

@pytest.mark.parametrize('index', [-1, 1.5, '3', True, None])
def test_invalid_index_rejected(store, index):
    with pytest.raises(InvalidFlagIndex):
        store.set(index)
    with pytest.raises(InvalidFlagIndex):
        store.test(index)
    with pytest.raises(InvalidFlagIndex):
        store.clear(index)
    with pytest.raises(InvalidFlagIndex):
        store.toggle(index)

def test_invalid_index_is_value_error(store):
    with pytest.raises(ValueError):
        store.set(-5)

def test_copy_is_independent(store):
    store.set(1)
    duplicate = store.copy()
    duplicate.set(2)
    store.clear(1)
    assert duplicate.test(1) and duplicate.test(2)
    assert not store.test(2)
    assert duplicate.variant is store.variant

def test_equality_across_variants():
    stores = make_stores()
    for store in stores:
        for index in (0, 64, 130):
            store.set(index)
    bounded, unbounded, sparse = stores
    assert bounded == unbounded == sparse
    sparse.set(131)
    assert sparse != bounded
    assert bounded != {0, 64, 130}

def test_variant_tags():
    bounded, unbounded, sparse = make_stores()
    assert bounded.variant is StoreVariant.DENSE_BOUNDED
    assert unbounded.variant is StoreVariant.DENSE_UNBOUNDED
    assert sparse.variant is StoreVariant.SPARSE

def test_stores_are_unhashable():
    for store in make_stores():
        with pytest.raises(TypeError):
            hash(store)
