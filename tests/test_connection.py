import pytest

from gwsrest.connection import (ConnectionResolver, CredentialSource, load_config,
                                validate_connection, CONFIG_PATH_ENV)
from gwsrest.errors import ConfigurationError

from conftest import TEST_CONNECTION


@pytest.mark.parametrize("missing,message", [
    ("api_scopes", "The api scopes field is required."),
    ("customer_id", "The customer id field is required."),
    ("domain", "The domain field is required."),
])
def test_missing_required_field(missing, message):
    config = dict(TEST_CONNECTION)
    del config[missing]
    with pytest.raises(ConfigurationError) as e:
        validate_connection(config)
    assert(str(e.value) == message)
    assert(e.value.field == missing)


def test_empty_values_count_as_missing():
    with pytest.raises(ConfigurationError, match="The api scopes field is required."):
        validate_connection({**TEST_CONNECTION, "api_scopes": []})
    with pytest.raises(ConfigurationError, match="The domain field is required."):
        validate_connection({**TEST_CONNECTION, "domain": ""})


@pytest.mark.parametrize("name,value,message", [
    ("api_scopes", "s1", "The api scopes must be an array."),
    ("api_scopes", ["s1", 2], "The api scopes.1 must be a string."),
    ("customer_id", ["cust1"], "The customer id must be a string."),
    ("domain", {"name": "dom1"}, "The domain must be a string."),
    ("subject_email", ["a@dom1"], "The subject email must be a string."),
    ("json_key_file_path", 12, "The json key file path must be a string."),
    ("log_channels", "single", "The log channels must be an array."),
])
def test_wrong_types(name, value, message):
    with pytest.raises(ConfigurationError) as e:
        validate_connection({**TEST_CONNECTION, name: value})
    assert(str(e.value) == message)


def test_credentials_required():
    config = dict(TEST_CONNECTION)
    del config["json_key_file_path"]
    with pytest.raises(ConfigurationError) as e:
        validate_connection(config)
    assert(str(e.value) == "Either the json_key_file_path or json_key parameters are required.")


def test_only_one_credential():
    with pytest.raises(ConfigurationError, match="Only one of"):
        validate_connection({**TEST_CONNECTION, "json_key": "{}"})


def test_defaults():
    c = validate_connection(TEST_CONNECTION)
    assert(c.key is None)
    assert(c.api_scopes == ("s1",))
    assert(c.subject_email is None)
    assert(c.log_channels == ("single",))
    assert(c.credential_source == CredentialSource(json_key_file_path="/k.json"))
    assert(c.credential_source)


def test_resolve_named(named_config):
    resolver = ConnectionResolver(named_config)
    c = resolver.resolve("other")
    assert(c.key == "other")
    assert(c.domain == "other.example.com")
    assert(c.subject_email == "admin@other.example.com")
    assert(c.credential_source.json_key == '{"type": "service_account"}')
    assert(c.credential_source.json_key_file_path is None)
    assert(c.log_channels == ("single", "workspace"))


def test_resolve_default_connection(named_config):
    c = ConnectionResolver(named_config).resolve()
    assert(c.key == "test")
    assert(c.customer_id == "cust1")


def test_inline_takes_precedence(named_config):
    inline = {**TEST_CONNECTION, "domain": "inline.example.com"}
    c = ConnectionResolver(named_config).resolve("other", inline)
    assert(c.key is None)
    assert(c.domain == "inline.example.com")


def test_inline_is_validated_without_named_config():
    with pytest.raises(ConfigurationError, match="The customer id field is required."):
        ConnectionResolver().resolve(None, {"api_scopes": ["s1"], "domain": "d",
                                            "json_key": "{}"})


def test_unknown_connection(named_config):
    with pytest.raises(ConfigurationError) as e:
        ConnectionResolver(named_config).resolve("nope")
    assert("`nope`" in str(e.value))
    assert(e.value.connection_key == "nope")


def test_no_default_connection():
    with pytest.raises(ConfigurationError, match="no default connection"):
        ConnectionResolver({"connections": {}}).resolve()


def test_inline_key_not_in_dict_form():
    c = validate_connection({"api_scopes": ["s1"], "customer_id": "c", "domain": "d",
                             "json_key": "secret"})
    b = c.to_base()
    assert("secret" not in str(b))
    assert("secret" not in repr(c))
    assert(b["json_key_file_path"] is None)


def test_load_config_file(tmp_path):
    p = tmp_path / "gws.yaml"
    p.write_text(
        "default:\n"
        "  connection: test\n"
        "connections:\n"
        "  test:\n"
        "    api_scopes: [s1]\n"
        "    customer_id: cust1\n"
        "    domain: dom1\n"
        "    json_key_file_path: /k.json\n", encoding="utf-8")
    config = load_config(p)
    c = ConnectionResolver(config).resolve()
    assert(c.key == "test")
    assert(c.domain == "dom1")


def test_load_config_env(tmp_path, monkeypatch):
    p = tmp_path / "env.yaml"
    p.write_text("default:\n  connection: from-env\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_PATH_ENV, str(p))
    assert(load_config()["default"]["connection"] == "from-env")


def test_load_config_missing(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.setattr("gwsrest.connection.DEFAULT_CONFIG_PATH", tmp_path / "nothing.yaml")
    assert(load_config() == {})
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "explicit.yaml")


def test_load_config_not_a_mapping(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="must contain a mapping"):
        load_config(p)


def test_trim_drops_unset_fields():
    t = validate_connection(TEST_CONNECTION).trim()
    assert(t == {"api_scopes": ["s1"], "customer_id": "cust1", "domain": "dom1",
                 "json_key_file_path": "/k.json", "log_channels": ["single"]})
