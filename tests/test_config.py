"""
YAML config loading and the formula registry.
"""
import pytest

from config.config_loader import clear_config_cache, load_config
from config.formulas import FormulaRegistry
from core.errors import FormulaConfigError
from core.models import ExtruderType, WearFormulaSet


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_config_cache()
    yield
    clear_config_cache()


class TestLoadConfig:
    def test_default_config(self):
        config = load_config()

        assert config["mqtt"]["port"] == 1883
        assert config["alerts"]["max_alerts"] == 8
        assert len(config["formulas"]) == 3

    def test_cached_per_path(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("mqtt: {port: 1}\n", encoding="utf-8")

        first = load_config(str(path))
        path.write_text("mqtt: {port: 2}\n", encoding="utf-8")

        assert load_config(str(path)) is first
        assert first["mqtt"]["port"] == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == {}


class TestFormulaRegistry:
    def test_default_active_sets(self):
        registry = FormulaRegistry.from_config(load_config())

        assert registry.active("principale") == WearFormulaSet(75, 8.94, 64.66)
        assert registry.active(ExtruderType.SECONDARY) == WearFormulaSet(50, 8.94, 46.18)

    def test_inactive_entries_kept_in_history(self):
        registry = FormulaRegistry.from_config(load_config())

        history = registry.history("principale")

        assert [e.version for e in history] == ["legacy-2023", "principale-2024"]
        assert [e.is_active for e in history] == [False, True]

    def test_activate_replaces_active_set(self, formula_registry):
        new = WearFormulaSet(80, 9.0, 70.0)

        formula_registry.activate("principale", new, version="p-2")

        assert formula_registry.active("principale") == new
        assert [e.is_active for e in formula_registry.history("principale")] == [False, True]
        # other extruder untouched
        assert formula_registry.active("secondaire") == WearFormulaSet(50, 8.94, 46.18)

    def test_no_active_set(self):
        registry = FormulaRegistry.from_config({"formulas": []})

        with pytest.raises(FormulaConfigError) as exc:
            registry.active("principale")

        assert exc.value.extruder_type == "principale"
        assert "no active formula set" in str(exc.value)

    def test_several_active_sets(self, sample_config):
        sample_config["formulas"].append(dict(sample_config["formulas"][0], version="p-dup"))
        registry = FormulaRegistry.from_config(sample_config)

        with pytest.raises(FormulaConfigError, match="p-dup"):
            registry.active("principale")

    @pytest.mark.parametrize("value", [None, "abc", float("inf")])
    def test_invalid_constant(self, sample_config, value):
        sample_config["formulas"][0]["barrel_constant_c"] = value

        with pytest.raises(FormulaConfigError):
            FormulaRegistry.from_config(sample_config)

    def test_unknown_extruder_type(self):
        with pytest.raises(FormulaConfigError):
            FormulaRegistry.from_config({
                "formulas": [{
                    "extruder_type": "tertiaire",
                    "screw_constant_a": 1,
                    "screw_constant_b": 1,
                    "barrel_constant_c": 1,
                }]
            })
