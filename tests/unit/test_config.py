"""Unit tests for query configuration."""

import pytest

from querykit.config import DebugRenderConfig, QueryConfig, load_config_from_env
from querykit.exceptions import ImproperConfigurationError


def test_query_config_defaults() -> None:
    config = QueryConfig()

    assert config.true_flag == "t"
    assert config.false_flag == "f"
    assert config.keep_key_columns is False
    assert config.validate_parameters is True
    assert config.render == DebugRenderConfig()
    assert config.validate() == []


def test_render_config_defaults() -> None:
    render = DebugRenderConfig()

    assert render.error_open_tag == '<span class="sql-error">'
    assert render.error_close_tag == "</span>"
    assert render.default_error_length == 5
    assert render.title_template.format(key=":a", value="1") == '<abbr title=":a">1</abbr>'


def test_config_is_immutable() -> None:
    config = QueryConfig()
    with pytest.raises(AttributeError):
        config.true_flag = "y"  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"true_flag": "x", "false_flag": "x"}, "true_flag and false_flag must differ"),
        ({"render": DebugRenderConfig(default_error_length=-1)}, "default_error_length must not be negative"),
        ({"render": DebugRenderConfig(title_template="{key}")}, "title_template must contain a {value} field"),
    ],
)
def test_invalid_config_raises(kwargs: dict, message: str) -> None:
    with pytest.raises(ImproperConfigurationError) as exc_info:
        QueryConfig(**kwargs)

    assert message in str(exc_info.value)


def test_normalize_flag() -> None:
    config = QueryConfig(true_flag="1", false_flag="0")

    assert config.normalize_flag(True) == "1"
    assert config.normalize_flag(False) == "0"


def test_load_config_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TRUE_FLAG", "FALSE_FLAG", "KEEP_KEY_COLUMNS", "VALIDATE_PARAMETERS", "DEFAULT_ERROR_LENGTH"):
        monkeypatch.delenv(f"QUERYKIT_{name}", raising=False)

    assert load_config_from_env() == QueryConfig()


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUERYKIT_TRUE_FLAG", "Y")
    monkeypatch.setenv("QUERYKIT_FALSE_FLAG", "N")
    monkeypatch.setenv("QUERYKIT_KEEP_KEY_COLUMNS", "yes")
    monkeypatch.setenv("QUERYKIT_VALIDATE_PARAMETERS", "false")
    monkeypatch.setenv("QUERYKIT_DEFAULT_ERROR_LENGTH", "8")

    config = load_config_from_env()

    assert config.true_flag == "Y"
    assert config.false_flag == "N"
    assert config.keep_key_columns is True
    assert config.validate_parameters is False
    assert config.render.default_error_length == 8


def test_load_config_custom_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_TRUE_FLAG", "1")
    monkeypatch.setenv("APP_FALSE_FLAG", "0")

    config = load_config_from_env(prefix="APP_")

    assert (config.true_flag, config.false_flag) == ("1", "0")


def test_load_config_malformed_int_warns(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("QUERYKIT_DEFAULT_ERROR_LENGTH", "many")

    with caplog.at_level("WARNING", logger="querykit.config"):
        config = load_config_from_env()

    assert config.render.default_error_length == 5
    assert "Invalid integer value for QUERYKIT_DEFAULT_ERROR_LENGTH" in caplog.text


def test_load_config_invalid_combination(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUERYKIT_TRUE_FLAG", "x")
    monkeypatch.setenv("QUERYKIT_FALSE_FLAG", "x")

    with pytest.raises(ImproperConfigurationError):
        load_config_from_env()
