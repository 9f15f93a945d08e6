"""Unit tests for ArgumentFileLoader."""

from decimal import Decimal
from pathlib import Path

import pytest

from argbind.exceptions import ArgumentLoadError
from argbind.io import ArgumentFileLoader


class TestArgumentFileLoader:
    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "args.json"
        path.write_text('{"id": 1, "price": 19.99, "tags": ["a"]}', encoding="utf-8")

        data = ArgumentFileLoader.load(path)

        assert data == {"id": 1, "price": 19.99, "tags": ["a"]}
        assert isinstance(data["price"], float)

    def test_load_json_exact_decimals(self, tmp_path: Path) -> None:
        path = tmp_path / "args.json"
        path.write_text('{"price": 19.99, "id": 1}', encoding="utf-8")

        data = ArgumentFileLoader.load(path, exact_decimals=True)

        assert data["price"] == Decimal("19.99")
        assert data["id"] == 1

    @pytest.mark.parametrize("suffix", [".yaml", ".yml"])
    def test_load_yaml(self, tmp_path: Path, suffix: str) -> None:
        path = tmp_path / f"args{suffix}"
        path.write_text(
            "bookInput:\n  name: test name\n  authorId: 42\n", encoding="utf-8"
        )

        data = ArgumentFileLoader.load(str(path))

        assert data == {"bookInput": {"name": "test name", "authorId": 42}}

    def test_empty_yaml_is_empty_map(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ArgumentFileLoader.load(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ArgumentLoadError, match="File not found"):
            ArgumentFileLoader.load(tmp_path / "missing.json")

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "args.toml"
        path.write_text("id = 1", encoding="utf-8")
        with pytest.raises(ArgumentLoadError, match="Unsupported extension"):
            ArgumentFileLoader.load(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ArgumentLoadError, match="Cannot parse broken.json"):
            ArgumentFileLoader.load(path)

    def test_top_level_list_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ArgumentLoadError, match="must be a mapping"):
            ArgumentFileLoader.load(path)
