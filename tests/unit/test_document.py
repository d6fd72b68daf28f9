import pytest

from dhcpstack.config.document import DocumentAccessor, YamlDocument
from dhcpstack.config.errors import DocumentTypeError


def test_yaml_document_satisfies_accessor_protocol() -> None:
    assert isinstance(YamlDocument({}), DocumentAccessor)


def test_has_value_distinguishes_missing_and_null() -> None:
    document = YamlDocument({"server6": None, "server4": {"listen": "0.0.0.0:67"}})
    assert document.has_value("server4")
    assert document.has_value("server4.listen")
    assert not document.has_value("server6")
    assert not document.has_value("server4.plugins")
    assert not document.has_value("server4.listen.port")


def test_get_string_converts_scalars() -> None:
    document = YamlDocument({"a": 67, "b": True, "c": "text"})
    assert document.get_string("a") == "67"
    assert document.get_string("b") == "true"
    assert document.get_string("c") == "text"
    assert document.get_string("missing") == ""


def test_get_string_rejects_containers() -> None:
    document = YamlDocument({"server4": {"listen": ["0.0.0.0:67"]}})
    with pytest.raises(DocumentTypeError, match="'server4.listen' must be a string"):
        document.get_string("server4.listen")


def test_get_raw_list_returns_copy_or_none() -> None:
    plugins = [{"dns": "8.8.8.8"}]
    document = YamlDocument({"server4": {"plugins": plugins, "listen": "x"}})
    result = document.get_raw_list("server4.plugins")
    assert result == plugins
    assert result is not plugins
    assert document.get_raw_list("server4.listen") is None
    assert document.get_raw_list("server6.plugins") is None


def test_lookup_is_case_insensitive_for_mapping_keys() -> None:
    document = YamlDocument({"SERVER6": {"Listen": "[::]:547"}})
    assert document.get_string("server6.listen") == "[::]:547"
    assert document.get_raw_value("Server6.LISTEN") == "[::]:547"


def test_document_requires_mapping() -> None:
    with pytest.raises(DocumentTypeError):
        YamlDocument(["server6"])  # type: ignore[arg-type]
    assert not YamlDocument(None).has_value("server6")
