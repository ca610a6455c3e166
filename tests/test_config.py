from plugcli.config import Configuration, coerce_to_bool
from plugcli.plugins.core.schema import PLUGCLI_CONFIG_SCHEMA
from plugcli.utils import merge
from plugcli.validation import ConfigField, ConfigItems, ConfigValidator, format_config_error


def test_config_access(test_logger):
    conf = Configuration({"a": 1, "b": "test"}, logger=test_logger)
    assert conf["a"] == 1
    assert conf.get("b") == "test"
    assert conf.get("c", 3) == 3


def test_get_bool(test_logger):
    conf = Configuration({"t1": True, "t2": "yes", "f1": "off", "f2": "0", "empty": "", "other": "foo"}, logger=test_logger)
    assert conf.get_bool("t1") is True
    assert conf.get_bool("t2") is True
    assert conf.get_bool("f1") is False
    assert conf.get_bool("f2") is False
    assert conf.get_bool("empty") is False
    assert conf.get_bool("other") is True
    assert conf.get_bool("missing", default=True) is True


def test_coerce_to_bool():
    assert coerce_to_bool(None, default=True) is True
    assert coerce_to_bool("disabled") is False
    assert coerce_to_bool(1) is True


def test_typed_getters(test_logger):
    conf = Configuration({"i": "2", "bad": "x", "f": "1.5", "s": 3, "l": "one"}, logger=test_logger)
    assert conf.get_int("i") == 2
    assert conf.get_int("bad", default=7) == 7
    assert conf.get_float("f") == 1.5
    assert conf.get_str("s") == "3"
    assert conf.get_list("l") == ["one"]
    assert conf.get_list("missing") == []


def test_schema_defaults(test_logger):
    conf = Configuration({"page_size": 10}, logger=test_logger, schema=PLUGCLI_CONFIG_SCHEMA)
    assert conf.get_int("page_size") == 10
    assert conf.get_float("timeout") == 30.0
    assert conf.get_list("plugins") == []
    assert conf.get_bool("colored_output") is True


def test_config_items_lookup():
    schema = ConfigItems(ConfigField("a", int), ConfigField("b"))
    assert schema.get("a").field_type is int
    assert schema.get("c") is None


def test_format_config_error():
    msg = format_config_error("plugcli", "plugins", "Missing required field", "Add plugins = []")
    assert msg == "[plugcli] Config error for 'plugins': Missing required field -> Add plugins = []"


def test_validator_required_and_types(test_logger):
    schema = ConfigItems(
        ConfigField("command", str, required=True),
        ConfigField("count", int),
        ConfigField("timeout", (int, float)),
        ConfigField("enabled", bool),
    )
    assert len(ConfigValidator({}, "test", test_logger).validate(schema)) == 1
    assert ConfigValidator({"command": "x", "count": 1, "timeout": 2, "enabled": "yes"}, "test", test_logger).validate(schema) == []
    errors = ConfigValidator({"command": "x", "count": True, "timeout": "slow"}, "test", test_logger).validate(schema)
    assert len(errors) == 2
    assert "Expected int, got bool" in errors[0]
    assert "Expected int or float, got str" in errors[1]


def test_validator_choices(test_logger):
    schema = ConfigItems(ConfigField("mode", str, choices=["a", "b"]))
    errors = ConfigValidator({"mode": "c"}, "test", test_logger).validate(schema)
    assert len(errors) == 1
    assert "Valid options: 'a', 'b'" in errors[0]


def test_unknown_keys(test_logger):
    warnings = ConfigValidator({"plugin": [], "api_host": "x"}, "plugcli", test_logger).warn_unknown_keys(PLUGCLI_CONFIG_SCHEMA)
    assert len(warnings) == 1
    assert "Did you mean 'plugins'?" in warnings[0]


def test_merge():
    merged = merge({"a": {"b": 1}, "l": [1]}, {"a": {"c": 2}, "l": [2]})
    assert merged == {"a": {"b": 1, "c": 2}, "l": [1, 2]}
    assert merge({"l": [1]}, {"l": [2]}, replace=True) == {"l": [2]}
