import io

import orjson
import pytest

from flagstore import DenseBoundedStore, DenseUnboundedStore, SparseStore, OutOfRange, convert, create_store, select_variant
from flagstore.logging import Logger
from flagstore.tiering import _covering_capacity
from models.constants import FLAG_CONSTANTS
from models.variants import StoreVariant

def test_select_variant_rules():
    threshold = FLAG_CONSTANTS.store.sparse_density_threshold
    limit = FLAG_CONSTANTS.store.bounded_capacity_limit

    assert select_variant() is StoreVariant.DENSE_UNBOUNDED
    assert select_variant(capacity=128) is StoreVariant.DENSE_BOUNDED
    assert select_variant(capacity=limit) is StoreVariant.DENSE_BOUNDED
    assert select_variant(capacity=limit + 1) is StoreVariant.DENSE_UNBOUNDED
    assert select_variant(capacity=128, expected_density=threshold / 2) is StoreVariant.SPARSE
    assert select_variant(expected_density=0.0) is StoreVariant.SPARSE
    assert select_variant(capacity=128, expected_density=0.9) is StoreVariant.DENSE_BOUNDED

@pytest.mark.parametrize('kwargs', [{'capacity': -1}, {'capacity': 1.5}, {'expected_density': 1.5}, {'expected_density': -0.1}])
def test_select_variant_rejects_bad_hints(kwargs):
    with pytest.raises(ValueError):
        select_variant(**kwargs)

def test_create_store_honours_explicit_variant():
    assert isinstance(create_store(StoreVariant.SPARSE, capacity=128), SparseStore)
    assert isinstance(create_store(StoreVariant.DENSE_UNBOUNDED, capacity=128), DenseUnboundedStore)
    bounded = create_store(StoreVariant.DENSE_BOUNDED)
    assert isinstance(bounded, DenseBoundedStore)
    assert bounded.capacity >= FLAG_CONSTANTS.store.default_capacity

def test_create_store_from_hints():
    store = create_store(capacity=100, word_width=32)
    assert isinstance(store, DenseBoundedStore)
    assert store.capacity == 128
    assert store.word_width == 32
    assert isinstance(create_store(expected_density=0.001), SparseStore)

def test_convert_between_all_variants():
    source = SparseStore()
    for index in (1, 64, 300):
        source.set(index)

    bounded = convert(source, StoreVariant.DENSE_BOUNDED)
    assert isinstance(bounded, DenseBoundedStore)
    assert bounded.capacity == 320
    assert bounded == source

    unbounded = convert(bounded, StoreVariant.DENSE_UNBOUNDED)
    assert isinstance(unbounded, DenseUnboundedStore)
    assert unbounded == source

    back = convert(unbounded, StoreVariant.SPARSE)
    assert isinstance(back, SparseStore)
    assert back == source
    assert back is not source

def test_convert_keeps_bounded_word_width():
    source = DenseBoundedStore(64, 16)
    source.set(40)
    converted = convert(source, StoreVariant.DENSE_BOUNDED)
    assert converted.word_width == 16
    assert converted.capacity == 48

def test_convert_empty_into_bounded():
    converted = convert(SparseStore(), StoreVariant.DENSE_BOUNDED)
    assert converted.capacity == 0
    assert len(converted) == 0

def test_convert_into_too_small_bounded_store_raises_and_logs():
    sink = io.BytesIO()
    logger = Logger(sink, batch_size=1)
    source = DenseUnboundedStore()
    source.set(1000)
    with pytest.raises(OutOfRange):
        convert(source, StoreVariant.DENSE_BOUNDED, capacity=128, logger=logger)

    record = orjson.loads(sink.getvalue().splitlines()[0])
    assert record['logged_by'] == 'tiering'
    assert record['log_category'] == 'storage'
    assert record['severity'] == 3

def test_convert_logs_success():
    sink = io.BytesIO()
    logger = Logger(sink, batch_size=10)
    source = SparseStore()
    source.set(2)
    convert(source, StoreVariant.DENSE_UNBOUNDED, logger=logger)
    assert logger.pending == 1
    logger.flush_logs()
    record = orjson.loads(sink.getvalue())
    assert 'sparse -> dense_unbounded' in record['log_details']

def test_convert_rejects_zero_word_width():
    source = SparseStore()
    source.set(3)
    with pytest.raises(ValueError):
        convert(source, StoreVariant.DENSE_BOUNDED, word_width=0)

def test_convert_covers_flags_past_float_precision():
    source = SparseStore()
    source.set(2**53)
    converted = convert(source, StoreVariant.DENSE_UNBOUNDED)
    assert converted.indices() == [2**53]
    assert _covering_capacity(source, 1) == 2**53 + 1
    assert _covering_capacity(source, 64) == 2**53 + 64
