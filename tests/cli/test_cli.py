"""Tests for the pinyin-search CLI commands."""

from __future__ import annotations

import argparse
import json
import logging

import polars as pl
import pytest

from pinyin_search.interfaces.cli.main import (
    build_parser,
    cmd_filter,
    cmd_mapping,
    cmd_search,
    load_labels,
    main,
)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test away from the repository's default config file.

    Root logger handlers installed by ``main`` are removed afterwards.
    """
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _search_args(source, query, **overrides):
    values = dict(
        source=source,
        query=query,
        json=False,
        config=None,
        strict_case=False,
        merge_spaces=False,
        consecutive=False,
        strictness=None,
        no_color=True,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


def _filter_args(query, labels, **overrides):
    values = dict(
        query=query,
        labels=str(labels),
        column=None,
        config=None,
        strict_case=False,
        merge_spaces=False,
        consecutive=False,
        strictness=None,
        no_color=True,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestCmdSearch:
    """Tests for cmd_search."""

    def test_hit_prints_ranges_and_highlight(self, capsys):
        assert cmd_search(_search_args("我在北京大学", "bjdx")) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["2-5", "我在[北京大学]"]

    def test_no_match_returns_1(self, capsys):
        assert cmd_search(_search_args("北京大学", "shanghai")) == 1
        assert capsys.readouterr().out == ""

    def test_json_output(self, capsys):
        assert cmd_search(_search_args("a b", "ab", json=True, merge_spaces=True)) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload == {
            "source": "a b",
            "query": "ab",
            "ranges": [[0, 2]],
            "highlighted": "[a b]",
        }

    def test_json_output_without_match(self, capsys):
        assert cmd_search(_search_args("abc", "x", json=True)) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["ranges"] is None
        assert payload["highlighted"] == "abc"

    def test_config_file_applies(self, tmp_path):
        config = tmp_path / "opts.yaml"
        config.write_text("search:\n  is_char_consecutive: true\n", encoding="utf-8")
        assert cmd_search(_search_args("a b", "ab", config=str(config))) == 1
        assert cmd_search(_search_args("a b", "ab", config=str(config), merge_spaces=True)) == 0

    def test_default_config_in_working_directory(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "search.yaml").write_text(
            "search:\n  strict_case: true\n", encoding="utf-8"
        )
        assert cmd_search(_search_args("北京", "BJ")) == 1

    def test_missing_config_returns_2(self, tmp_path):
        assert cmd_search(_search_args("abc", "a", config=str(tmp_path / "nope.yaml"))) == 2

    def test_malformed_config_returns_2(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("search: [unclosed\n", encoding="utf-8")
        assert cmd_search(_search_args("abc", "a", config=str(config))) == 2

    def test_invalid_strictness_returns_2(self):
        assert cmd_search(_search_args("abc", "a", strictness=0.0)) == 2

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_non_finite_strictness_returns_2(self, value):
        """Non-finite coefficients are rejected as options, not raised from search."""
        argv = ["--errors-only", "search", "tetmplpimpo", "emp", "--strictness", value]
        assert main(argv) == 2


class TestLoadLabels:
    def test_text_file_skips_blank_lines(self, tmp_path):
        path = tmp_path / "labels.txt"
        path.write_text("北京大学\n\n  \n清华大学\n", encoding="utf-8")
        assert load_labels(path) == ["北京大学", "清华大学"]

    def test_csv_first_column_by_default(self, tmp_path):
        path = tmp_path / "labels.csv"
        pl.DataFrame({"name": ["北京", "上海"], "code": ["1", "2"]}).write_csv(path)
        assert load_labels(path) == ["北京", "上海"]

    def test_csv_named_column_kept_as_text(self, tmp_path):
        path = tmp_path / "labels.csv"
        pl.DataFrame({"name": ["北京", "上海"], "code": ["001", "002"]}).write_csv(path)
        assert load_labels(path, "code") == ["001", "002"]

    def test_parquet(self, tmp_path):
        path = tmp_path / "labels.parquet"
        pl.DataFrame({"label": ["北京", None, "上海"]}).write_parquet(path)
        assert load_labels(path) == ["北京", "上海"]

    def test_missing_column(self, tmp_path):
        path = tmp_path / "labels.csv"
        pl.DataFrame({"name": ["北京"]}).write_csv(path)
        with pytest.raises(KeyError, match="label"):
            load_labels(path, "label")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_labels(tmp_path / "absent.txt")


class TestCmdFilter:
    """Tests for cmd_filter."""

    def test_prints_matches_in_file_order(self, tmp_path, capsys):
        path = tmp_path / "labels.txt"
        path.write_text("上海大学\n北京大学\n北京\n", encoding="utf-8")
        assert cmd_filter(_filter_args("bj", path)) == 0
        assert capsys.readouterr().out.splitlines() == ["[北京]大学", "[北京]"]

    def test_csv_column(self, tmp_path, capsys):
        path = tmp_path / "cities.csv"
        pl.DataFrame({"id": ["1", "2"], "city": ["北京", "上海"]}).write_csv(path)
        assert cmd_filter(_filter_args("sh", path, column="city")) == 0
        assert capsys.readouterr().out.splitlines() == ["[上]海"]

    def test_no_matches_returns_1(self, tmp_path):
        path = tmp_path / "labels.txt"
        path.write_text("北京\n", encoding="utf-8")
        assert cmd_filter(_filter_args("gz", path)) == 1

    def test_missing_labels_returns_2(self, tmp_path):
        assert cmd_filter(_filter_args("bj", tmp_path / "absent.txt")) == 2

    def test_missing_column_returns_2(self, tmp_path):
        path = tmp_path / "labels.csv"
        pl.DataFrame({"name": ["北京"]}).write_csv(path)
        assert cmd_filter(_filter_args("bj", path, column="label")) == 2


def test_cmd_mapping_dumps_json(capsys):
    assert cmd_mapping(argparse.Namespace(source="中a")) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["pinyin_string"] == "zhonga"
    assert payload["original_indices"] == [0, 5, 6]
    assert payload["boundary"][0] == [-1, -1]
    assert payload["boundary"][-1] == [1, 5]


def test_parser_requires_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_main_search(capsys):
    assert main(["--errors-only", "search", "北京大学", "dx", "--no-color"]) == 0
    assert capsys.readouterr().out.splitlines() == ["2-3", "北京[大学]"]


def test_main_filter_with_flags(tmp_path, capsys):
    path = tmp_path / "labels.txt"
    path.write_text("a b\nab\n", encoding="utf-8")
    code = main(["--errors-only", "filter", "ab", "--labels", str(path), "--consecutive", "--no-color"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["[ab]"]
