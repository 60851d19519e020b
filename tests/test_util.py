import pytest

from snakecore.util import (
    INVALID_UUID,
    UUID,
    new_uuid,
    push_back_multiple,
    type_id,
    vector_contains,
)


def test_uuid_with_value():
    uid = UUID(5)
    assert int(uid) == 5
    assert uid() == 5
    assert uid.value == 5


def test_uuid_equality_and_hash():
    assert UUID(42) == UUID(42)
    assert hash(UUID(42)) == hash(UUID(42))
    assert len({UUID(42), UUID(42), UUID(7)}) == 2


def test_random_uuid_is_valid():
    uid = UUID()
    assert int(uid) != INVALID_UUID
    assert 0 < int(uid) < 2**64


@pytest.mark.parametrize("value", [-1, 2**64])
def test_uuid_out_of_range(value):
    with pytest.raises(ValueError):
        UUID(value)


def test_new_uuid_unique_and_nonzero():
    values = {new_uuid() for _ in range(100)}
    assert len(values) == 100
    assert INVALID_UUID not in values


def test_type_id_stable_and_distinct():
    class First:
        pass

    class Second:
        pass

    a = type_id(First)
    b = type_id(Second)
    assert a != b
    assert type_id(First) == a
    assert type_id(Second) == b


def test_vector_contains():
    items = ["x", "y"]
    assert vector_contains("x", items) is True
    assert vector_contains("z", items) is False


def test_push_back_multiple():
    items = [1]
    push_back_multiple(items, 2, 3, 4)
    assert items == [1, 2, 3, 4]