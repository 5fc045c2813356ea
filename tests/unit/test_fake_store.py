"""
Unit tests for the fake agent's KVStore.

The integration suite trusts these rules when no live agent is
configured, so they are pinned down here.
"""
import pytest

from fakeconsul.store import InvalidSession, KVStore


@pytest.mark.asyncio
async def test_store_put_get():
    """Test basic put and get operations"""
    store = KVStore()

    assert await store.put("key1", b"value1", flags=5) is True

    entry = await store.get("key1")
    assert entry["Value"] == b"value1"
    assert entry["Flags"] == 5
    assert entry["CreateIndex"] == entry["ModifyIndex"] == store.index
    assert await store.get("does-not-exist") is None


@pytest.mark.asyncio
async def test_store_empty_body_has_no_value():
    """Test that an empty body is stored as no value"""
    store = KVStore()
    await store.put("empty", None)

    assert (await store.get("empty"))["Value"] is None


@pytest.mark.asyncio
async def test_store_prefix_and_keys():
    """Test recursive listing and separator collapsing"""
    store = KVStore()
    for key in ("a", "a/b", "a/b/c", "a/d", "b"):
        await store.put(key, b"x")

    assert [e["Key"] for e in await store.list_prefix("a")] == ["a", "a/b", "a/b/c", "a/d"]
    assert await store.keys("a/") == ["a/b", "a/b/c", "a/d"]
    assert await store.keys("a/", separator="/") == ["a/b", "a/b/", "a/d"]


@pytest.mark.asyncio
async def test_store_delete():
    """Test plain and recursive deletes"""
    store = KVStore()
    for key in ("tree", "tree/leaf", "other"):
        await store.put(key, b"x")

    await store.delete("tree")
    assert await store.get("tree") is None
    assert await store.get("tree/leaf") is not None

    await store.delete("tree", recurse=True)
    assert await store.get("tree/leaf") is None
    assert await store.size() == 1


@pytest.mark.asyncio
async def test_store_lock_cycle():
    """Test acquire, refused re-acquire, and release"""
    store = KVStore()
    session = await store.create_session(name="holder")
    other = await store.create_session(name="other")

    assert await store.put("lock", b"v", acquire=session["ID"]) is True
    assert await store.put("lock", b"v", acquire=session["ID"]) is False
    assert await store.put("lock", b"v", acquire=other["ID"]) is False
    assert await store.put("lock", None, release=other["ID"]) is False

    assert await store.put("lock", None, release=session["ID"]) is True
    entry = await store.get("lock")
    assert entry["Session"] is None
    assert entry["Value"] == b"v"
    assert entry["LockIndex"] == 1


@pytest.mark.asyncio
async def test_store_unknown_session():
    """Test that locking with an unknown session is refused"""
    store = KVStore()

    with pytest.raises(InvalidSession):
        await store.put("lock", b"v", acquire="nope")


@pytest.mark.asyncio
async def test_store_cas():
    """Test check-and-set on writes and deletes"""
    store = KVStore()

    assert await store.put("k", b"1", cas=0) is True
    assert await store.put("k", b"2", cas=0) is False
    index = (await store.get("k"))["ModifyIndex"]
    assert await store.delete("k", cas=index + 1) is False
    assert await store.delete("k", cas=index) is True
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_store_destroy_session_behaviors():
    """Test release and delete behavior on destroy"""
    store = KVStore()
    releasing = await store.create_session(name="r")
    deleting = await store.create_session(name="d", behavior="delete")
    await store.put("kept", b"x", acquire=releasing["ID"])
    await store.put("gone", b"x", acquire=deleting["ID"])

    await store.destroy_session(releasing["ID"])
    await store.destroy_session(deleting["ID"])

    assert (await store.get("kept"))["Session"] is None
    assert await store.get("gone") is None
    assert await store.list_sessions() == []
    assert await store.session_info(releasing["ID"]) is None
