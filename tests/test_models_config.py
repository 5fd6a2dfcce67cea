"""Tests for configuration models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.errors import ConfigurationError
from src.models.config import (
    ActionSpec,
    PathSpec,
    Selector,
    Settings,
    SiteConfig,
    Viewport,
    default_site_config,
    is_valid_config,
)


class TestIdAssignment:
    """IDs are assigned once, sequentially, while the config is built."""

    def test_ids_follow_list_order(self, multi_site_config: SiteConfig):
        assert [v.id for v in multi_site_config.viewports] == [0, 1]
        assert [p.id for p in multi_site_config.paths] == [0, 1]
        assert [a.id for a in multi_site_config.actions] == [0]
        assert [s.id for s in multi_site_config.shell] == [0, 1]

    def test_path_selectors_numbered(self, multi_site_config: SiteConfig):
        assert multi_site_config.paths[0].selectors[0].id == 0

    def test_ids_from_raw_dict(self, site_dict: dict):
        site_dict["viewports"].append({"label": "mobile", "width": 375, "height": 812})
        config = SiteConfig.model_validate(site_dict)
        assert [v.id for v in config.viewports] == [0, 1]

    def test_explicit_ids_are_overwritten(self, site_dict: dict):
        site_dict["viewports"][0]["id"] = 42
        config = SiteConfig.model_validate(site_dict)
        assert config.viewports[0].id == 0

    def test_config_is_frozen(self, site_config: SiteConfig):
        with pytest.raises(ValidationError):
            site_config.label = "other"
        with pytest.raises(ValidationError):
            site_config.viewports[0].id = 7


class TestSelectors:
    def test_accepts_bare_strings(self, site_config: SiteConfig):
        assert site_config.shell[0] == Selector(value="header", id=0)
        assert site_config.paths[0].selectors[0].value == ".hero"

    def test_accepts_objects(self, site_dict: dict):
        site_dict["shell"] = [{"value": "nav"}]
        config = SiteConfig.model_validate(site_dict)
        assert config.shell[0].value == "nav"


class TestValidation:
    """is_valid_config(): the pre-flight check before anything is captured."""

    def test_fully_populated_config_is_valid(self, site_dict: dict):
        assert is_valid_config(site_dict) is True

    def test_built_config_is_valid(self, site_config: SiteConfig):
        assert is_valid_config(site_config) is True

    @pytest.mark.parametrize("field", ["url", "label", "shell", "paths", "viewports"])
    def test_missing_required_field(self, site_dict: dict, field: str):
        del site_dict[field]
        assert is_valid_config(site_dict) is False

    @pytest.mark.parametrize("field", ["url", "label"])
    def test_empty_string_field(self, site_dict: dict, field: str):
        site_dict[field] = ""
        assert is_valid_config(site_dict) is False

    @pytest.mark.parametrize("field", ["paths", "viewports"])
    def test_empty_required_list(self, site_dict: dict, field: str):
        site_dict[field] = []
        assert is_valid_config(site_dict) is False

    def test_empty_shell_list_is_allowed(self, site_dict: dict):
        site_dict["shell"] = []
        assert is_valid_config(site_dict) is True

    def test_unknown_event_kind_rejected(self, site_dict: dict):
        site_dict["actions"] = [{"event": "doubleclick", "label": "x", "selector": "a"}]
        assert is_valid_config(site_dict) is False

    def test_undefined_action_reference_rejected(self, site_dict: dict):
        site_dict["paths"][0]["actions"] = [3]
        assert is_valid_config(site_dict) is False

    @pytest.mark.parametrize("label", [".", "..", "a/b", "a\\b", "../reference"])
    def test_site_label_must_be_a_directory_name(self, site_dict: dict, label: str):
        site_dict["label"] = label
        assert is_valid_config(site_dict) is False

    @pytest.mark.parametrize("label", [".", "..", "about/team", "a\\b"])
    def test_path_label_must_be_a_directory_name(self, site_dict: dict, label: str):
        site_dict["paths"][0]["label"] = label
        assert is_valid_config(site_dict) is False

    @pytest.mark.parametrize("label", [".", "..", "mobile/portrait"])
    def test_viewport_label_must_be_a_directory_name(self, site_dict: dict, label: str):
        site_dict["viewports"][0]["label"] = label
        assert is_valid_config(site_dict) is False

    def test_dotted_label_is_allowed(self, site_dict: dict):
        site_dict["viewports"][0]["label"] = "desktop.hd"
        assert is_valid_config(site_dict) is True

    def test_duplicate_viewport_labels_rejected(self, site_dict: dict):
        site_dict["viewports"].append({"label": "desktop", "width": 800, "height": 600})
        assert is_valid_config(site_dict) is False

    def test_duplicate_path_labels_rejected(self, site_dict: dict):
        site_dict["paths"].append({"label": "homepage", "path": "index.html"})
        assert is_valid_config(site_dict) is False

    def test_traversal_label_fails_to_load(self, site_dict: dict, tmp_path: Path):
        site_dict["viewports"][0]["label"] = ".."
        path = tmp_path / "traversal.json"
        path.write_text(json.dumps(site_dict))
        with pytest.raises(ConfigurationError, match="directory name"):
            SiteConfig.load(path)

    @pytest.mark.parametrize("value", [None, "wrench", 42, ["a"]])
    def test_non_mapping_is_invalid(self, value):
        assert is_valid_config(value) is False


class TestSiteConfigHelpers:
    def test_page_url_concatenates(self, multi_site_config: SiteConfig):
        assert multi_site_config.page_url(multi_site_config.paths[1]) == "https://example.com/about"

    def test_actions_for_resolves_ids_in_path_order(self):
        config = SiteConfig(
            label="s", url="https://s/",
            viewports=[Viewport(label="d", width=10, height=10)],
            paths=[PathSpec(label="p", actions=[1, 0])],
            actions=[
                ActionSpec(event="hover", label="a", selector=".a"),
                ActionSpec(event="click", label="b", selector=".b"),
            ],
            shell=[],
        )
        assert [a.label for a in config.actions_for(config.paths[0])] == ["b", "a"]

    def test_actions_for_path_without_actions(self, site_config: SiteConfig):
        assert site_config.actions_for(site_config.paths[0]) == []

    def test_uses_touch(self, site_dict: dict):
        assert SiteConfig.model_validate(site_dict).uses_touch is False
        site_dict["actions"] = [{"event": "tap", "label": "t", "selector": ".menu"}]
        assert SiteConfig.model_validate(site_dict).uses_touch is True

    def test_action_default_wait(self):
        assert ActionSpec(event="focus", label="f", selector="input").wait == 200


class TestLoadSave:
    def test_save_and_load_round_trip(self, multi_site_config: SiteConfig, tmp_path: Path):
        path = tmp_path / "configs" / "acme.json"
        multi_site_config.save(path)
        assert SiteConfig.load(path) == multi_site_config

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not found"):
            SiteConfig.load(tmp_path / "nope.json")

    def test_load_bad_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            SiteConfig.load(path)

    def test_load_invalid_config(self, tmp_path: Path, site_dict: dict):
        del site_dict["viewports"]
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps(site_dict))
        with pytest.raises(ConfigurationError, match="Invalid website configuration"):
            SiteConfig.load(path)

    def test_default_config_is_valid(self):
        config = default_site_config()
        assert config.label == "google"
        assert [v.label for v in config.viewports] == ["desktop", "mobile"]
        assert config.actions_for(config.paths[0])[0].event == "hover"


class TestSettings:
    def test_directory_layout(self, tmp_path: Path):
        settings = Settings.localized(tmp_path)
        assert settings.capture_dir == tmp_path / "output" / "captures" / "new"
        assert settings.reference_dir == tmp_path / "output" / "captures" / "reference"
        assert settings.output_dir == tmp_path / "output" / "results"

    def test_defaults(self):
        settings = Settings()
        assert settings.baseline_mode is False
        assert settings.headless is True
        assert settings.selector_timeout_ms == 10000
        assert settings.abort_on_error is True
