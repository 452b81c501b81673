import dataclasses

from kcas._cogs.configs.configuration import NetworkingSettings, Settings, UpdatingSettings


def test_declared_public_interface_and_promised_defaults():
    settings = Settings()
    assert settings.updating.poll_interval == 0.01
    assert settings.updating.timeout == 60
    assert settings.networking.request_timeout == 5 * 60
    assert settings.networking.connect_timeout is None
    assert list(settings.networking.error_backoffs) == []


def test_settings_are_not_shared():
    settings1 = Settings()
    settings2 = Settings()
    settings1.updating.timeout = 1
    assert settings2.updating.timeout == 60


def test_settings_groups_can_be_passed_explicitly():
    settings = Settings(updating=UpdatingSettings(poll_interval=1, timeout=2),
                        networking=NetworkingSettings(error_backoffs=[1, 2, 3]))
    assert settings.updating.poll_interval == 1
    assert settings.updating.timeout == 2
    assert settings.networking.error_backoffs == [1, 2, 3]


def test_settings_are_dataclasses():
    settings = Settings()
    settings2 = dataclasses.replace(settings, updating=UpdatingSettings(timeout=5))
    assert settings2.updating.timeout == 5
    assert settings2.networking is settings.networking
