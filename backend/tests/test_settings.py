import pytest

from app.core.settings import MailConfigError, get_mail_settings

MAIL_ENV = {
    "EMAIL_HOST": "smtp.example.com",
    "EMAIL_USER": "relay",
    "EMAIL_PASS": "secret",
    "EMAIL_SEND_TO": "inbox@example.com",
}


@pytest.fixture(autouse=True)
def fresh_mail_settings(monkeypatch, tmp_path):
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for key in MAIL_ENV:
        monkeypatch.delenv(key, raising=False)
    get_mail_settings.cache_clear()
    yield
    get_mail_settings.cache_clear()


def test_mail_settings_load_from_environment(monkeypatch):
    for key, value in MAIL_ENV.items():
        monkeypatch.setenv(key, value)

    mail = get_mail_settings()

    assert mail.host == "smtp.example.com"
    assert mail.user == "relay"
    assert mail.password == "secret"
    assert mail.send_to == "inbox@example.com"


def test_mail_settings_are_cached(monkeypatch):
    for key, value in MAIL_ENV.items():
        monkeypatch.setenv(key, value)
    assert get_mail_settings() is get_mail_settings()


def test_missing_mail_settings_name_the_variables(monkeypatch):
    monkeypatch.setenv("EMAIL_HOST", "smtp.example.com")
    monkeypatch.setenv("EMAIL_USER", "relay")

    with pytest.raises(MailConfigError) as info:
        get_mail_settings()

    assert info.value.missing == ["EMAIL_PASS", "EMAIL_SEND_TO"]
    assert "EMAIL_PASS" in str(info.value)


def test_mail_settings_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("\n".join(f"{k}={v}" for k, v in MAIL_ENV.items()))
    assert get_mail_settings().send_to == "inbox@example.com"
