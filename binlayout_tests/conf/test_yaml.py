from pathlib import Path

import pytest

from binlayout.utils.yaml import dict_from_extended_yaml, dict_from_yaml

FIXTURES = Path(__file__).parent / 'fixtures'


def test_dict_from_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_yaml_empty():
    result = dict_from_yaml(filepath=FIXTURES / 'empty.yml')

    assert result == {}


def test_dict_from_yaml_invalid_contents():
    filepath = FIXTURES / 'number.yml'

    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath=filepath)

    assert str(e.value) == f"'{filepath}' cannot be parsed as a dictionary"


def test_dict_from_yaml_valid():
    result = dict_from_yaml(filepath=FIXTURES / 'valid.yml')

    assert result == dict(a=1, b=dict(c=2, d=3))


def test_dict_from_extended_yaml_without_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES / 'valid.yml')

    assert result == dict(a=1, b=dict(c=2, d=3))


def test_dict_from_extended_yaml_invalid_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'invalid_extends.yml')

    assert "/fixtures/unknown_file.yml' is not a file" in str(e.value)


def test_dict_from_extended_yaml_self_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'self_extends.yml')

    assert str(e.value) == 'Cannot parse yaml with recursive extensions.'


def test_dict_from_extended_yaml_valid_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES / 'valid_extends.yml')

    assert result == dict(a='aa', b=dict(c=2, d='dd', e='ee'))


def test_dict_from_extended_yaml_custom_root():
    # `extends: default.yml` isn't next to the file, so it's looked up in the custom root
    custom_root = Path(__file__).parent.parent.parent / 'binlayout' / 'conf'
    result = dict_from_extended_yaml(filepath=FIXTURES / 'small_settings.yml', custom_root=custom_root)

    assert result['COUNT_FORMAT'] == 'B'
    assert result['MAX_CONTAINER_LENGTH'] == 100
    assert result['TEXT_ENCODING'] == 'utf-8'


def test_dict_from_extended_yaml_cycle():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'cycle_a.yml')

    assert str(e.value) == 'Cannot parse yaml with recursive extensions.'
