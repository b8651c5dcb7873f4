from sqlweave.utils import redact_params, redact_value
from sqlweave.utils.redaction import REDACTED_VALUE, is_sensitive_key


def test_redact_params_masks_secret_looking_values():
    params = [1, "Bearer abc", "plain", b"token=xyz", None]
    assert redact_params(params) == [1, REDACTED_VALUE, "plain", REDACTED_VALUE, None]


def test_redact_value_walks_containers():
    value = {"password": "hunter2", "user": "amy", "nested": [("apiKey", {"api_key": "k"})]}
    assert redact_value(value) == {
        "password": REDACTED_VALUE,
        "user": "amy",
        "nested": [(REDACTED_VALUE, {"api_key": REDACTED_VALUE})],
    }


def test_sensitive_keys():
    assert is_sensitive_key("DB_PASSWORD")
    assert is_sensitive_key("Access-Key")
    assert not is_sensitive_key("username")


def test_redact_params_masks_sensitive_columns():
    params = ["amy", "hunter2", 3]
    assert redact_params(params, ["user", "password", None]) == ["amy", REDACTED_VALUE, 3]
    assert redact_params(params, ["user"]) == params
