"""
Shared fixtures.

The suite talks to the agent named by CONSUL_HTTP_ADDR when it is set;
otherwise it runs against the in-process fake agent.
"""
import os

import pytest
from fastapi.testclient import TestClient

from consulkv.client import Consul
from fakeconsul.main import create_app


@pytest.fixture
def consul():
    """A Consul client bound to a live agent or a fresh fake one"""
    address = os.getenv("CONSUL_HTTP_ADDR")
    if address:
        with Consul.builder().with_url(address).build() as client:
            yield client
        return

    with TestClient(create_app()) as http_client:
        with Consul.builder().with_http_client(http_client).build() as client:
            yield client


@pytest.fixture
def kv(consul):
    return consul.key_value_client()


@pytest.fixture
def sessions(consul):
    return consul.session_client()
