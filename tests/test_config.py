"""Configuration settings test suite.

Validate environment loading, defaults, immutability and the datasource
secret override rules.
"""
import os
from unittest import mock

import pytest
from pydantic import ValidationError

from app.config import Settings, default_datasource, load_datasource


def settings_with_secret(path) -> Settings:
    return Settings(POSTGRESQL_FILEPATH=str(path), _env_file=None)


def test_defaults_without_environment():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.APPLICATION_ROLE == "ALL"
    assert settings.APPLICATION_VERSION == "Api Tester v1.0.0"
    assert settings.SPRING_PROFILES_ACTIVE == "default"
    assert settings.VOLUME_PATH_PERSISTENT_VOLUME_DATA == "./files/pv/"
    assert settings.VOLUME_PATH_POD_VOLUME_DATA == "./files/pod/"
    assert settings.POSTGRESQL_FILEPATH == "/etc/config/postgresql.yaml"
    assert settings.PORT == 8080


def test_environment_overrides_defaults():
    env_vars = {
        "APPLICATION_ROLE": "GET",
        "APPLICATION_VERSION": "Api Tester v2.0.0",
        "SPRING_PROFILES_ACTIVE": "dev",
        "VOLUME_PATH_POD_VOLUME_DATA": "/data/pod",
    }
    with mock.patch.dict(os.environ, env_vars, clear=True):
        settings = Settings(_env_file=None)

    assert settings.APPLICATION_ROLE == "GET"
    assert settings.APPLICATION_VERSION == "Api Tester v2.0.0"
    assert settings.SPRING_PROFILES_ACTIVE == "dev"
    assert settings.VOLUME_PATH_POD_VOLUME_DATA == "/data/pod"


def test_role_is_a_free_form_label():
    """Verify any role value is accepted as given, since it is only displayed."""
    with mock.patch.dict(os.environ, {"APPLICATION_ROLE": "get"}, clear=True):
        assert Settings(_env_file=None).APPLICATION_ROLE == "get"
    assert Settings(APPLICATION_ROLE="PATCH", _env_file=None).APPLICATION_ROLE == "PATCH"


def test_settings_are_frozen():
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.APPLICATION_VERSION = "changed"


def test_default_password_is_masked():
    dumped = str(Settings(_env_file=None).model_dump())
    assert "'pass'" not in dumped


def test_missing_secret_keeps_defaults(tmp_path):
    settings = settings_with_secret(tmp_path / "absent.yaml")
    assert load_datasource(settings) == default_datasource(settings)


def test_secret_overrides_present_non_empty_fields(tmp_path):
    secret = tmp_path / "postgresql.yaml"
    secret.write_text(
        "driver-class-name: org.postgresql.Driver\n"
        "url: jdbc:postgresql://postgresql:5432/postgres\n"
        "username: dev\n"
        'password: ""\n'
    )

    datasource = load_datasource(settings_with_secret(secret))

    assert datasource.url == "jdbc:postgresql://postgresql:5432/postgres"
    assert datasource.username == "dev"
    assert datasource.driver_class_name == "org.postgresql.Driver"
    assert datasource.password.get_secret_value() == "pass"


def test_secret_password_override(tmp_path):
    secret = tmp_path / "postgresql.yaml"
    secret.write_text("password: s3cr3t\n")

    datasource = load_datasource(settings_with_secret(secret))

    assert datasource.password.get_secret_value() == "s3cr3t"
    assert datasource.username == "user"


@pytest.mark.parametrize(
    "content",
    [
        "url: [unterminated\n",
        "- just\n- a list\n",
        "username:\n  nested: mapping\n",
    ],
)
def test_malformed_secret_keeps_defaults(tmp_path, content):
    """Verify unparseable secrets are non-fatal and leave defaults in place."""
    secret = tmp_path / "postgresql.yaml"
    secret.write_text(content)
    settings = settings_with_secret(secret)

    with mock.patch("app.config.logger") as logger:
        datasource = load_datasource(settings)

    assert datasource == default_datasource(settings)
    logger.error.assert_called_once()


def test_empty_secret_keeps_defaults(tmp_path):
    secret = tmp_path / "postgresql.yaml"
    secret.write_text("")
    settings = settings_with_secret(secret)

    assert load_datasource(settings) == default_datasource(settings)


def test_numeric_secret_values_are_applied(tmp_path):
    """Verify numeric scalars override defaults instead of voiding the secret."""
    secret = tmp_path / "postgresql.yaml"
    secret.write_text("username: admin\npassword: 123456\n")

    datasource = load_datasource(settings_with_secret(secret))

    assert datasource.username == "admin"
    assert datasource.password.get_secret_value() == "123456"


def test_undecodable_secret_is_logged_and_non_fatal(tmp_path):
    secret = tmp_path / "postgresql.yaml"
    secret.write_bytes(b"username: \xff\xfe\n")
    settings = settings_with_secret(secret)

    with mock.patch("app.config.logger") as logger:
        datasource = load_datasource(settings)

    assert datasource == default_datasource(settings)
    logger.error.assert_called_once()
