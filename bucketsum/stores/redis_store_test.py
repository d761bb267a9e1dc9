from unittest.mock import MagicMock

from bucketsum.stores.redis_store import RedisStore

def makeStore(prefix="bucketsum"):
    client = MagicMock()
    return RedisStore(client=client, prefix=prefix), client

def test_increment_uses_hincrby():
    store, client = makeStore()
    store.Increment("requests", "2015-02", 3)
    client.hincrby.assert_called_once_with("bucketsum:requests", "2015-02", 3)

def test_read_one():
    store, client = makeStore()
    client.hget.return_value = b"12"
    assert store.ReadOne("requests", "2015-02") == 12
    client.hget.assert_called_once_with("bucketsum:requests", "2015-02")
    client.hget.return_value = None
    assert store.ReadOne("requests", "2015-03") is None

def test_read_many_keeps_order_and_absent():
    store, client = makeStore(prefix="")
    client.hmget.return_value = [b"1", None, b"0"]
    assert store.ReadMany("requests", ["a", "b", "c"]) == [1, None, 0]
    client.hmget.assert_called_once_with("requests", ["a", "b", "c"])

def test_read_many_empty_skips_round_trip():
    store, client = makeStore()
    assert store.ReadMany("requests", []) == []
    client.hmget.assert_not_called()
