import pytest

from tinyurl.utils.runtime import running_locally


@pytest.mark.parametrize(
    'app_env, sam_local, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', None, False),
        ('dev', 'true', True),
        (None, 'true', True),
        (None, None, False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_local, expected):
    if app_env is not None:
        monkeypatch.setenv('APP_ENV', app_env)
    if sam_local is not None:
        monkeypatch.setenv('AWS_SAM_LOCAL', sam_local)

    assert running_locally() is expected
