import pydantic
import pytest

from models.constants import CONSTANTS_FILEPATH, FLAG_CONSTANTS, load_constants

def test_packaged_constants():
    assert FLAG_CONSTANTS.store.word_width == 64
    assert FLAG_CONSTANTS.store.default_capacity == 128
    assert FLAG_CONSTANTS.serialization.default_text_base in (10, 16)
    assert FLAG_CONSTANTS.serialization.max_payload_capacity >= 8 * FLAG_CONSTANTS.serialization.max_payload_bytesize
    assert FLAG_CONSTANTS.permissions.permission_word_width >= 8

def test_load_constants_from_custom_file(tmp_path):
    text = CONSTANTS_FILEPATH.read_text().replace('word_width = 64', 'word_width = 32')
    custom = tmp_path / 'constants.toml'
    custom.write_text(text)
    assert load_constants(custom).store.word_width == 32

def test_invalid_constants_rejected(tmp_path):
    text = CONSTANTS_FILEPATH.read_text().replace('default_capacity = 128', 'default_capacity = 1000000')
    custom = tmp_path / 'constants.toml'
    custom.write_text(text)
    with pytest.raises(pydantic.ValidationError):
        load_constants(custom)
