import pytest

from ponto.exceptions import StorageError


def test_put_get_and_delete(storage):
    path = storage.put("colab-1/fp-0001.jpeg", b"photo", "image/jpeg")

    assert storage.exists(path)
    assert storage.get(path) == b"photo"
    assert storage.get_public_url(path) == "http://test/storage/point-photos/colab-1/fp-0001.jpeg"

    storage.delete(path)
    assert not storage.exists(path)


def test_put_never_overwrites(storage):
    storage.put("colab-1/fp-0001.jpeg", b"first", "image/jpeg")

    with pytest.raises(StorageError):
        storage.put("colab-1/fp-0001.jpeg", b"second", "image/jpeg")

    assert storage.get("colab-1/fp-0001.jpeg") == b"first"


def test_delete_missing_object_is_noop(storage):
    storage.delete("colab-1/never-stored.jpeg")


@pytest.mark.parametrize("key", ["../escape.jpeg", "colab-1/../../escape.jpeg", "/abs.jpeg", ""])
def test_rejects_unsafe_keys(storage, key):
    with pytest.raises(StorageError):
        storage.put(key, b"x", "image/jpeg")


def test_get_missing_object(storage):
    with pytest.raises(StorageError):
        storage.get("colab-1/missing.jpeg")
