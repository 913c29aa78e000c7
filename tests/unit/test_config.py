import pytest

from sinklog.config import LoggerConfig, load_config
from sinklog.models import local_now, utc_now
from sinklog.renderer import WriteFailurePolicy

_ENV_VARS = [
    "SINKLOG_DESTINATION",
    "SINKLOG_COLOR",
    "SINKLOG_THREAD_LABEL_WIDTH",
    "SINKLOG_TIMEZONE",
    "SINKLOG_ON_WRITE_FAILURE",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("sinklog.config.dotenv.load_dotenv", lambda *a, **k: False)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


def test_load_config_defaults():
    cfg = load_config()
    assert cfg.destination == "stdout"
    assert cfg.color == "always"
    assert cfg.thread_label_width == 5
    assert cfg.timezone == "utc"
    assert cfg.on_write_failure == "abort"
    assert cfg.clock is utc_now
    assert cfg.write_failure_policy is WriteFailurePolicy.ABORT


def test_load_config_parses_optional_fields(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SINKLOG_DESTINATION", " /var/log/app.log ")
    monkeypatch.setenv("SINKLOG_COLOR", "Never")
    monkeypatch.setenv("SINKLOG_THREAD_LABEL_WIDTH", "8")
    monkeypatch.setenv("SINKLOG_TIMEZONE", "local")
    monkeypatch.setenv("SINKLOG_ON_WRITE_FAILURE", "drop")

    cfg = load_config()
    assert cfg.destination == "/var/log/app.log"
    assert cfg.color == "never"
    assert cfg.thread_label_width == 8
    assert cfg.clock is local_now
    assert cfg.write_failure_policy is WriteFailurePolicy.DROP


def test_zero_width_disables_truncation(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SINKLOG_THREAD_LABEL_WIDTH", "0")
    assert load_config().thread_label_width is None


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SINKLOG_COLOR", "sometimes"),
        ("SINKLOG_TIMEZONE", "mars"),
        ("SINKLOG_ON_WRITE_FAILURE", "panic"),
        ("SINKLOG_THREAD_LABEL_WIDTH", "five"),
        ("SINKLOG_THREAD_LABEL_WIDTH", "-1"),
    ],
)
def test_load_config_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        load_config()


def test_logger_config_validation():
    with pytest.raises(ValueError):
        LoggerConfig(destination="   ")
    with pytest.raises(ValueError):
        LoggerConfig(thread_label_width=0)
    with pytest.raises(ValueError):
        LoggerConfig(color="rainbow")


class _Tty:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def test_use_color_modes():
    assert LoggerConfig(color="always").use_color(_Tty(False)) is True
    assert LoggerConfig(color="never").use_color(_Tty(True)) is False
    assert LoggerConfig(color="auto").use_color(_Tty(True)) is True
    assert LoggerConfig(color="auto").use_color(_Tty(False)) is False
    assert LoggerConfig(color="auto").use_color(object()) is False
