"""
Connection resolution.

A connection is the bundle of settings needed to talk to one Workspace
tenant: the scopes to request, the domain and customer ID that the admin APIs
insist on, an optional user to impersonate and the service account key.
Connections are either named entries in a YAML config file::

    default:
      connection: workspace
    connections:
      workspace:
        api_scopes:
          - directory.group
          - https://www.googleapis.com/auth/admin.directory.user.readonly
        customer_id: C01234567
        domain: example.com
        subject_email: admin@example.com
        json_key_file_path: /etc/gwsrest/workspace.json
        log_channels: [single]

or the same fields handed over directly as a dict.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
import os

import yaml

from .errors import ConfigurationError
from .resources import WorkspaceRecord

CONFIG_PATH_ENV = "GWSREST_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path.home() / "gwsrest.yaml"
DEFAULT_LOG_CHANNEL = "single"


def config_path() -> Path:
    """The config file to use, GWSREST_CONFIG_PATH wins over the default."""
    return Path(os.environ.get(CONFIG_PATH_ENV, "") or DEFAULT_CONFIG_PATH)


def load_config(path: Path|str|None = None) -> dict:
    """
    Load the named connection configuration.
    If no path is given the environment variable or the default location is used,
    and a missing default file is just an empty config as inline connections
    don't need one.  A file that was asked for explicitly has to exist.
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_PATH_ENV))
    p = Path(path) if path is not None else config_path()
    if not p.is_file():
        if explicit:
            raise ConfigurationError(f"The configuration file {p} does not exist.")
        return {}
    with open(p, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"The configuration file {p} is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"The configuration file {p} must contain a mapping.")
    return dict(data)


@dataclass(frozen=True)
class CredentialSource():
    """
    Where the service account key comes from.
    Exactly one of the two is set once a connection has been resolved.
    """
    json_key_file_path: str|None = None
    json_key: str|None = field(default=None, repr=False)

    def __bool__(self) -> bool:
        return bool(self.json_key_file_path) != bool(self.json_key)

    def describe(self) -> str:
        if self.json_key_file_path:
            return f"key file {self.json_key_file_path}"
        return "inline json key"


@dataclass(frozen=True)
class ConnectionDescriptor(WorkspaceRecord):
    """
    A fully validated connection.
    key is None when it was built from an inline config dict.
    """
    api_scopes: tuple[str, ...]
    customer_id: str
    domain: str
    credential_source: CredentialSource
    subject_email: str|None = None
    log_channels: tuple[str, ...] = (DEFAULT_LOG_CHANNEL,)
    key: str|None = None

    def __str__(self) -> str:
        name = self.key if self.key else "<inline>"
        return f"{name}:{self.domain}:{self.customer_id}"

    # the inline key must never reach a log
    HIDDEN = ("credential_source",)

    def to_base(self) -> dict:
        b = super().to_base()
        b['json_key_file_path'] = self.credential_source.json_key_file_path
        return b


def _words(name: str) -> str:
    return name.replace('_', ' ')


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, (str, list, tuple)) and not value)


def _require_string(config: Mapping, name: str, connection_key: str|None) -> str:
    v = config.get(name)
    if _is_missing(v):
        raise ConfigurationError(f"The {_words(name)} field is required.",
                                 field=name, connection_key=connection_key)
    if not isinstance(v, str):
        raise ConfigurationError(f"The {_words(name)} must be a string.",
                                 field=name, connection_key=connection_key)
    return v


def _optional_string(config: Mapping, name: str, connection_key: str|None) -> str|None:
    v = config.get(name)
    if v is None or v == "":
        return None
    if not isinstance(v, str):
        raise ConfigurationError(f"The {_words(name)} must be a string.",
                                 field=name, connection_key=connection_key)
    return v


def _string_list(config: Mapping, name: str, connection_key: str|None,
                 default: tuple[str, ...]|None = None) -> tuple[str, ...]:
    v = config.get(name)
    if _is_missing(v):
        if default is not None:
            return default
        raise ConfigurationError(f"The {_words(name)} field is required.",
                                 field=name, connection_key=connection_key)
    if not isinstance(v, (list, tuple)):
        raise ConfigurationError(f"The {_words(name)} must be an array.",
                                 field=name, connection_key=connection_key)
    for i, item in enumerate(v):
        if not isinstance(item, str):
            raise ConfigurationError(f"The {_words(name)}.{i} must be a string.",
                                     field=name, connection_key=connection_key)
    return tuple(v)


def validate_connection(config: Mapping, connection_key: str|None = None) -> ConnectionDescriptor:
    """
    Check a single connection's fields and build the descriptor.
    The same rules apply whether it came from the config file or inline.
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError("The connection configuration must be a mapping.",
                                 connection_key=connection_key)
    api_scopes = _string_list(config, 'api_scopes', connection_key)
    customer_id = _require_string(config, 'customer_id', connection_key)
    domain = _require_string(config, 'domain', connection_key)
    subject_email = _optional_string(config, 'subject_email', connection_key)
    json_key_file_path = _optional_string(config, 'json_key_file_path', connection_key)
    json_key = _optional_string(config, 'json_key', connection_key)
    if not json_key_file_path and not json_key:
        raise ConfigurationError("Either the json_key_file_path or json_key parameters are required.",
                                 field='json_key_file_path', connection_key=connection_key)
    if json_key_file_path and json_key:
        raise ConfigurationError("Only one of the json_key_file_path or json_key parameters may be set.",
                                 field='json_key', connection_key=connection_key)
    log_channels = _string_list(config, 'log_channels', connection_key,
                                default=(DEFAULT_LOG_CHANNEL,))
    return ConnectionDescriptor(api_scopes=api_scopes,
                                customer_id=customer_id,
                                domain=domain,
                                credential_source=CredentialSource(json_key_file_path, json_key),
                                subject_email=subject_email,
                                log_channels=log_channels,
                                key=connection_key)


class ConnectionResolver():
    """
    Turns a connection name or an inline config dict into a ConnectionDescriptor.
    The named configuration is whatever mapping it is given, typically the
    output of load_config().  Resolution has no side effects beyond raising.
    """

    def __init__(self, config: Mapping|None = None) -> None:
        self._config = dict(config) if config else {}

    @property
    def config(self) -> dict:
        return self._config

    @property
    def connections(self) -> Mapping:
        c = self._config.get('connections') or {}
        if not isinstance(c, Mapping):
            raise ConfigurationError("The connections configuration must be a mapping.")
        return c

    @property
    def default_connection(self) -> str|None:
        d = self._config.get('default') or {}
        v = d.get('connection') if isinstance(d, Mapping) else None
        return str(v) if v else None

    def resolve(self, connection_key: str|None = None,
                connection_config: Mapping|None = None) -> ConnectionDescriptor:
        """
        An inline config takes precedence and produces an unnamed descriptor,
        otherwise the key (or the configured default) is looked up.
        """
        if connection_config:
            return validate_connection(connection_config)
        key = connection_key if connection_key else self.default_connection
        if not key:
            raise ConfigurationError(
                "No connection key was provided and no default connection is configured. "
                "Set default.connection in the configuration file or pass a connection config.")
        connections = self.connections
        if key not in connections:
            raise ConfigurationError(
                f"The Google connection key `{key}` is not defined in the connections "
                f"configuration. Without this configuration, there is no API "
                f"configuration to connect with.", connection_key=key)
        return validate_connection(connections[key], connection_key=key)
