"""Tests for escli.mapping covering base-url resolution and command mapping.

Run with coverage:
    pytest tests/test_mapping.py --maxfail=1 -v --cov=escli.mapping --cov-report=term-missing
"""

import pytest

from escli.commands import Command, Family, OperationArgs, RequestDescriptor
from escli.config import ConnectionSettings, ProxySettings
from escli.errors import MissingArgument, OperationNotImplemented, UnsupportedOperation
from escli.mapping import map_command, resolve_base_url

BASE = "http://localhost:9200"


def _connection(**overrides):
    values = dict(protocol="http", host="es.internal", port=9200, username="elastic",
                  password="changeme", version="8.8.0")
    values.update(overrides)
    return ConnectionSettings(**values)


def _proxy(enabled=True, **overrides):
    values = dict(host="bastion", port=9201, key="id_rsa", remote_user="ubuntu",
                  enabled=enabled, protocol="http")
    values.update(overrides)
    return ProxySettings(**values)


def _command(family, **kwargs):
    return Command(family, OperationArgs(**kwargs))


def test_resolve_base_url_direct_without_proxy():
    assert resolve_base_url(_connection()) == "http://es.internal:9200"
    assert resolve_base_url(_connection(protocol="https", port=443), None) == "https://es.internal:443"


def test_resolve_base_url_ignores_disabled_proxy():
    assert resolve_base_url(_connection(), _proxy(enabled=False)) == "http://es.internal:9200"


def test_resolve_base_url_uses_loopback_when_proxy_enabled():
    proxy = _proxy(protocol="https", port=9443)
    assert resolve_base_url(_connection(), proxy) == "https://127.0.0.1:9443"
    assert resolve_base_url(_connection(host="other", port=1), proxy) == "https://127.0.0.1:9443"


def test_resolve_base_url_is_repeatable():
    connection, proxy = _connection(), _proxy()
    assert resolve_base_url(connection, proxy) == resolve_base_url(connection, proxy)


def test_info_is_plain_get_regardless_of_operation():
    expected = RequestDescriptor("GET", "http://127.0.0.1:9200")
    assert map_command(_command(Family.INFO), "http://127.0.0.1:9200") == expected
    request = map_command(_command(Family.INFO, operation="delete", body="{}"), "http://127.0.0.1:9200")
    assert request == expected
    assert request.body is None
    assert request.headers == {}


def test_index_create_with_body():
    request = map_command(
        _command(Family.INDEX, index_name="orders", body='{"settings":{}}', operation="create"), BASE
    )
    assert request == RequestDescriptor(
        "PUT", "http://localhost:9200/orders", '{"settings":{}}', {"Content-Type": "application/json"}
    )


def test_index_create_defaults_body_and_accepts_put():
    request = map_command(_command(Family.INDEX, index_name="orders", operation="PUT"), BASE)
    assert request.method == "PUT"
    assert request.body == "{}"


@pytest.mark.parametrize("operation", ["read", "get"])
def test_index_read(operation):
    request = map_command(_command(Family.INDEX, index_name="orders", operation=operation), BASE)
    assert request == RequestDescriptor("GET", "http://localhost:9200/orders")


def test_index_delete():
    request = map_command(_command(Family.INDEX, index_name="orders", operation="delete"), BASE + "/")
    assert request == RequestDescriptor("DELETE", "http://localhost:9200/orders")


def test_index_update_is_never_implemented():
    with pytest.raises(OperationNotImplemented):
        map_command(_command(Family.INDEX, index_name="orders", body="{}", operation="update"), BASE)
    with pytest.raises(OperationNotImplemented):
        map_command(_command(Family.INDEX, operation="update"), BASE)


def test_index_requires_name():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.INDEX, operation="read"), BASE)
    assert excinfo.value.field_name == "index_name"
    assert excinfo.value.context == "index read"


@pytest.mark.parametrize("operation", ["post", "options", "search"])
def test_index_rejects_unknown_operations(operation):
    with pytest.raises(UnsupportedOperation) as excinfo:
        map_command(_command(Family.INDEX, index_name="orders", operation=operation), BASE)
    assert excinfo.value.method == operation
    assert excinfo.value.family == "index"


def test_document_create():
    request = map_command(
        _command(Family.DOCUMENT, index_name="orders", body='{"a":1}', operation="create"), BASE
    )
    assert request == RequestDescriptor(
        "POST", "http://localhost:9200/orders/_doc", '{"a":1}', {"Content-Type": "application/json"}
    )


def test_document_create_requires_body():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.DOCUMENT, index_name="orders", operation="create"), BASE)
    assert excinfo.value.field_name == "body"
    assert excinfo.value.context == "document create"


@pytest.mark.parametrize("operation", ["read", "search"])
def test_document_search(operation):
    request = map_command(_command(Family.DOCUMENT, index_name="orders", operation=operation), BASE)
    assert request == RequestDescriptor("POST", "http://localhost:9200/orders/_search", "")
    assert request.headers == {}


def test_document_update():
    request = map_command(
        _command(Family.DOCUMENT, index_name="orders", body='{"doc":{}}', document_id="7", operation="update"),
        BASE,
    )
    assert request.method == "POST"
    assert request.url == "http://localhost:9200/orders/_update/7"
    assert request.headers == {"Content-Type": "application/json"}


def test_document_update_without_body():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.DOCUMENT, index_name="orders", document_id="7", operation="update"), BASE)
    assert (excinfo.value.field_name, excinfo.value.context) == ("body", "document update")


def test_document_update_without_id():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.DOCUMENT, index_name="orders", body="{}", operation="update"), BASE)
    assert excinfo.value.field_name == "document_id"


def test_document_delete_defaults_type():
    request = map_command(_command(Family.DOCUMENT, index_name="orders", document_id="42", operation="delete"), BASE)
    assert request == RequestDescriptor("DELETE", "http://localhost:9200/orders/_doc/42")


def test_document_delete_with_type_and_missing_id():
    request = map_command(
        _command(Family.DOCUMENT, index_name="orders", document_id="42", document_type="legacy", operation="delete"),
        BASE,
    )
    assert request.url == "http://localhost:9200/orders/legacy/42"
    with pytest.raises(MissingArgument):
        map_command(_command(Family.DOCUMENT, index_name="orders", operation="delete"), BASE)


def test_document_requires_index_name():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.DOCUMENT, body="{}", operation="create"), BASE)
    assert excinfo.value.field_name == "index_name"


def test_search_post_matches_document_search():
    request = map_command(_command(Family.SEARCH, index_name="orders", body='{"query":{}}', operation="post"), BASE)
    assert request == RequestDescriptor("POST", "http://localhost:9200/orders/_search", '{"query":{}}')


@pytest.mark.parametrize("method", ["get", "put", "delete", "options"])
def test_search_rejects_other_methods(method):
    with pytest.raises(UnsupportedOperation) as excinfo:
        map_command(_command(Family.SEARCH, index_name="orders", operation=method), BASE)
    assert method in str(excinfo.value)
    assert excinfo.value.family == "search"


def test_search_requires_index_name():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.SEARCH, operation="post"), BASE)
    assert excinfo.value.field_name == "index_name"
    assert excinfo.value.context == "search"


@pytest.mark.parametrize("operation", ["update", "delete"])
def test_document_empty_id_is_missing(operation):
    with pytest.raises(MissingArgument) as excinfo:
        map_command(
            _command(Family.DOCUMENT, index_name="orders", body="{}", document_id="", operation=operation), BASE
        )
    assert excinfo.value.field_name == "document_id"
    assert excinfo.value.context == f"document {operation}"


def test_empty_index_name_is_missing_but_empty_body_is_kept():
    with pytest.raises(MissingArgument) as excinfo:
        map_command(_command(Family.INDEX, index_name="", operation="delete"), BASE)
    assert excinfo.value.field_name == "index_name"

    request = map_command(_command(Family.DOCUMENT, index_name="orders", body="", operation="search"), BASE)
    assert request.body == ""
