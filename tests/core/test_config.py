import logging

from archytask.config import ConfigManager
from archytask.config.manager import get_user_config_dir
from archytask.core.models.settings import SidebarSettings
from archytask.logging_config import setup_logging


# --------------------------------------------------------------- settings


def test_settings_defaults_from_empty_config():
    assert SidebarSettings.from_config(None) == SidebarSettings()
    assert SidebarSettings.from_config({}) == SidebarSettings()


def test_settings_read_every_section():
    settings = SidebarSettings.from_config({
        "editor": {"task_move_modifier": "ALT", "new_item_trigger": "enter"},
        "history": {"max_entries": 10},
        "storage": {"file_path": "notes/todo.md", "save_debounce_seconds": 0.25},
    })
    assert settings.task_move_modifier == "alt"
    assert settings.new_item_trigger == "enter"
    assert settings.max_history == 10
    assert settings.file_path == "notes/todo.md"
    assert settings.save_debounce_seconds == 0.25


def test_settings_invalid_values_fall_back_to_defaults(caplog):
    with caplog.at_level(logging.WARNING):
        settings = SidebarSettings.from_config({
            "editor": {"task_move_modifier": "hyper", "new_item_trigger": "space"},
            "history": {"max_entries": "many"},
            "storage": {"file_path": "", "save_debounce_seconds": -3},
        })
    assert settings == SidebarSettings()
    assert "Invalid task_move_modifier" in caplog.text


def test_settings_map_cmd_to_ctrl():
    settings = SidebarSettings.from_config({"editor": {"task_move_modifier": "cmd"}})
    assert settings.task_move_modifier == "ctrl"


def test_settings_reject_non_positive_history():
    assert SidebarSettings.from_config({"history": {"max_entries": 0}}).max_history == 50


# ----------------------------------------------------------- config manager


def test_user_config_dir_honours_env(isolated_config):
    assert get_user_config_dir() == isolated_config


def test_packaged_defaults_are_loaded_and_copied(isolated_config):
    cfg = ConfigManager()
    settings = cfg.get_settings()

    assert settings["editor"]["task_move_modifier"] == "ctrl"
    assert settings["history"]["max_entries"] == 50
    assert cfg.get_logging_config()["version"] == 1
    assert (isolated_config / "settings.yml").exists()
    assert (isolated_config / "logging.yml").exists()


def test_user_overrides_are_merged(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "settings.yml").write_text("history:\n  max_entries: 10\n", encoding="utf-8")

    settings = ConfigManager().get_settings()
    assert settings["history"]["max_entries"] == 10
    assert settings["editor"]["new_item_trigger"] == "shift+enter"
    assert SidebarSettings.from_config(settings).max_history == 10


def test_user_override_merges_nested_keys(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "settings.yml").write_text("editor:\n  task_move_modifier: alt\n", encoding="utf-8")

    editor = ConfigManager().get_settings()["editor"]
    assert editor == {"task_move_modifier": "alt", "new_item_trigger": "shift+enter"}


def test_invalid_user_yaml_keeps_defaults(isolated_config, caplog):
    isolated_config.mkdir(parents=True)
    (isolated_config / "settings.yml").write_text("editor: [unclosed\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        settings = ConfigManager().get_settings()
    assert settings["editor"]["task_move_modifier"] == "ctrl"
    assert "Could not parse user config" in caplog.text


def test_non_mapping_user_yaml_is_ignored(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "settings.yml").write_text("- just\n- a list\n", encoding="utf-8")
    assert ConfigManager().get_settings()["history"]["max_entries"] == 50


def test_config_manager_is_a_singleton_until_reset():
    first = ConfigManager()
    assert ConfigManager() is first
    ConfigManager.reset()
    assert ConfigManager() is not first


# ------------------------------------------------------------------ logging


def test_setup_logging_writes_to_log_dir(isolated_config, restore_root_logging):
    log_dir = isolated_config.parent / "logs"
    setup_logging()
    logging.getLogger("archytask.test").info("hello from the test")

    for handler in logging.getLogger().handlers:
        handler.flush()
    log_file = log_dir / "archytask.log"
    assert log_file.exists()
    assert "hello from the test" in log_file.read_text(encoding="utf-8")


def test_debug_modules_env_raises_logger_level(monkeypatch, restore_root_logging):
    monkeypatch.setenv("ARCHYTASK_DEBUG_MODULES", "archytask.some.module, archytask.other")
    setup_logging()
    assert logging.getLogger("archytask.some.module").level == logging.DEBUG
    assert logging.getLogger("archytask.other").level == logging.DEBUG


def test_debug_edits_env_targets_editing_services(monkeypatch, restore_root_logging):
    monkeypatch.setenv("ARCHYTASK_DEBUG_EDITS", "yes")
    setup_logging()
    name = "archytask.core.services.edit_session_service"
    assert logging.getLogger(name).level == logging.DEBUG
