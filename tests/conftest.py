import pytest

from propcheck.validation import Container, MetadataStorage, Validator, get_metadata_storage, register_rules


@pytest.fixture
def storage():
    return MetadataStorage()


@pytest.fixture
def container():
    return Container()


@pytest.fixture
def validator(storage, container):
    return Validator(storage=storage, container=container)


@pytest.fixture
def declare(storage):
    """Register rules on the test's private storage: declare(Target, name=[...])."""
    def _declare(target, **properties):
        register_rules(storage, target, properties)
        return target
    return _declare


@pytest.fixture(autouse=True)
def clean_global_storage():
    yield
    get_metadata_storage().clear()
