import pytest

from epic_sync.config import SyncConfig, load_config, resolve_repo, resolve_token
from epic_sync.errors import ConfigurationError


def test_load_from_action_inputs():
    env = {
        "INPUT_EPIC-PREFIX": "[Epic]",
        "INPUT_TASKS-MARKER": "Tasks",
        "INPUT_CLOSE-COMPLETED-EPICS": "true",
    }
    cfg = load_config(env=env)
    assert cfg == SyncConfig(epic_prefix="[Epic]", tasks_marker="Tasks", close_completed_epics=True)


def test_defaults_apply():
    cfg = load_config(env={"INPUT_EPIC_PREFIX": "Epic:"})
    assert cfg.tasks_marker == "Workload"
    assert cfg.close_completed_epics is False


def test_yaml_then_env_then_overrides(tmp_path):
    path = tmp_path / "epic-sync.yml"
    path.write_text(
        "epic_sync:\n  epic-prefix: 'File:'\n  tasks_marker: Backlog\n  close_completed_epics: false\n",
        encoding="utf-8",
    )
    cfg = load_config(path, env={"INPUT_TASKS-MARKER": "Env"}, close_completed_epics=True, epic_prefix=None)
    assert cfg.epic_prefix == "File:"
    assert cfg.tasks_marker == "Env"
    assert cfg.close_completed_epics is True


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"INPUT_EPIC-PREFIX": ""},
    ],
)
def test_missing_prefix_is_configuration_error(env):
    with pytest.raises(ConfigurationError):
        load_config(env=env)


def test_empty_marker_is_configuration_error():
    with pytest.raises(ConfigurationError):
        load_config(env={"INPUT_EPIC-PREFIX": "Epic:"}, tasks_marker="")


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.yml", env={"INPUT_EPIC-PREFIX": "Epic:"})


def test_config_is_immutable():
    cfg = SyncConfig(epic_prefix="Epic:")
    with pytest.raises(Exception):
        cfg.epic_prefix = "Other"


def test_token_and_repo_resolution():
    env = {"INPUT_SECRET-TOKEN": "input-tok", "GITHUB_TOKEN": "env-tok", "GITHUB_REPOSITORY": "o/r"}
    assert resolve_token(env=env) == "input-tok"
    assert resolve_token("cli-tok", env=env) == "cli-tok"
    assert resolve_repo(env=env) == "o/r"
    with pytest.raises(ConfigurationError):
        resolve_token(env={})
    with pytest.raises(ConfigurationError):
        resolve_repo("no-slash", env={})
