"""Tests for the stage label table."""

from pathlib import Path

import pytest

from contract_enrichment.enrichment.stages import StageTable, normalize_stage
from contract_enrichment.exceptions import ConfigError


class TestNormalizeStage:
    """Tests for normalize_stage."""

    def test_case_and_whitespace(self) -> None:
        """Case and all whitespace are ignored."""
        assert normalize_stage(" Closed\tWon ") == "closedwon"
        assert normalize_stage("계약 완료") == "계약완료"

    def test_none(self) -> None:
        """None normalizes to an empty string."""
        assert normalize_stage(None) == ""


class TestStageTable:
    """Tests for StageTable."""

    def test_defaults(self) -> None:
        """Built-in labels classify as won or install."""
        table = StageTable()
        assert table.is_won("Closed Won")
        assert table.is_won("계약완료")
        assert table.is_install("출고진행")
        assert table.is_install("installation in progress")
        assert table.classify("Qualifying") is None
        assert table.classify(None) is None

    def test_add_variant(self) -> None:
        """New variants are data, not code."""
        table = StageTable()
        table.add("won", "Contract Signed")
        assert table.is_won("contractsigned")
        assert "contractsigned" in table.labels("won")

    def test_unknown_tag(self) -> None:
        """Only won and install are valid tags."""
        with pytest.raises(ConfigError):
            StageTable({"lost": ["Closed Lost"]})

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Extra labels load from YAML on top of the defaults."""
        path = tmp_path / "stages.yaml"
        path.write_text("won:\n  - Signed\ninstall: Shipping\n", encoding="utf-8")

        table = StageTable.from_yaml(path)

        assert table.is_won("signed")
        assert table.is_won("Closed Won")
        assert table.is_install("SHIPPING")

    def test_from_yaml_empty_file(self, tmp_path: Path) -> None:
        """An empty file gives the defaults."""
        path = tmp_path / "stages.yaml"
        path.write_text("", encoding="utf-8")
        assert StageTable.from_yaml(path).labels("won") == StageTable().labels("won")

    def test_from_yaml_not_a_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        path = tmp_path / "stages.yaml"
        path.write_text("- Closed Won\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            StageTable.from_yaml(path)
        assert exc_info.value.code == "CONFIG_INVALID"

    def test_from_yaml_bad_labels(self, tmp_path: Path) -> None:
        """Labels must be a list or a single string."""
        path = tmp_path / "stages.yaml"
        path.write_text("won:\n  nested: true\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            StageTable.from_yaml(path)
