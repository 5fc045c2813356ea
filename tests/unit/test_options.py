"""
Unit tests for request options.
"""
import pytest

from consulkv.option import ConsistencyMode, DeleteOptions, PutOptions, QueryOptions


def test_blank_query_options_render_nothing():
    """Test that blank options add no parameters or headers"""
    options = QueryOptions.blank()

    assert options.to_query() == {}
    assert options.to_headers() == {}
    assert not options.is_blocking


def test_blocking_query_options():
    """Test that blocking options carry wait and index"""
    options = QueryOptions.blocking("30s", 120)

    assert options.is_blocking
    assert options.to_query() == {"wait": "30s", "index": "120"}


def test_consistency_modes():
    """Test that consistency modes render as bare flags"""
    stale = QueryOptions(consistency_mode=ConsistencyMode.STALE)
    consistent = QueryOptions(consistency_mode=ConsistencyMode.CONSISTENT)

    assert stale.to_query() == {"stale": ""}
    assert consistent.to_query() == {"consistent": ""}


def test_token_and_datacenter():
    """Test that the token goes in a header and the datacenter in the query"""
    options = QueryOptions(token="secret", datacenter="dc2", near="_agent")

    assert options.to_query() == {"dc": "dc2", "near": "_agent"}
    assert options.to_headers() == {"X-Consul-Token": "secret"}


@pytest.mark.parametrize("wait", ["10", "soon", "5 s", "-1s"])
def test_invalid_wait_rejected(wait):
    """Test that malformed wait durations are refused"""
    with pytest.raises(ValueError):
        QueryOptions(wait=wait)


def test_put_options_render_lock_parameters():
    """Test that cas, acquire and release render as query parameters"""
    assert PutOptions(acquire="sess").to_query() == {"acquire": "sess"}
    assert PutOptions(release="sess").to_query() == {"release": "sess"}
    assert PutOptions(cas=0).to_query() == {"cas": "0"}


def test_put_options_acquire_and_release_exclusive():
    """Test that one write cannot both acquire and release"""
    with pytest.raises(ValueError):
        PutOptions(acquire="a", release="b")


def test_delete_options():
    """Test that delete options render recurse and cas"""
    assert DeleteOptions().to_query() == {}
    assert DeleteOptions(recurse=True, cas=9).to_query() == {"recurse": "", "cas": "9"}


def test_request_timeout_covers_wait():
    """Test the read timeout needed for a blocking wait"""
    assert QueryOptions.blank().request_timeout() is None
    assert QueryOptions(wait="16s").request_timeout() == pytest.approx(22.0)
    assert QueryOptions(wait="5m").request_timeout() == pytest.approx(323.75)
    assert QueryOptions(wait="1600ms").request_timeout() == pytest.approx(6.7)
