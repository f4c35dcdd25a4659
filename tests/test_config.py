"""Tests for parser options and YAML loading."""

from decimal import ROUND_HALF_EVEN, ROUND_UP

import pytest
from pydantic import ValidationError

from lima import parse
from lima.config import ParserOptions


class TestParserOptions:
    def test_defaults(self):
        options = ParserOptions()
        assert options.division_precision == 28
        assert options.division_rounding == ROUND_HALF_EVEN
        assert options.render_context_lines == 0

    def test_division_context(self):
        context = ParserOptions(division_precision=6, division_rounding=ROUND_UP).division_context()
        assert context.prec == 6
        assert context.rounding == ROUND_UP

    def test_unknown_rounding_rejected(self):
        with pytest.raises(ValidationError, match="unknown rounding mode"):
            ParserOptions(division_rounding="ROUND_SIDEWAYS")

    def test_precision_must_be_positive(self):
        with pytest.raises(ValidationError):
            ParserOptions(division_precision=0)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ParserOptions(strict=True)

    def test_frozen(self):
        options = ParserOptions()
        with pytest.raises(ValidationError):
            options.division_precision = 10

    def test_options_reach_parser(self):
        text = '2024-01-01 * "x"\n  Assets:Cash 1 / 3 USD\n'
        result = parse(text, options=ParserOptions(division_precision=4))
        assert str(result.directives[0].variant.postings[0].item.amount.item.value) == "0.3333"

    def test_render_context_default_from_options(self):
        text = "2024-01-01 close Assets:A\n2024-13-01 close Assets:B\n"
        result = parse(text, options=ParserOptions(render_context_lines=1))
        assert "1 | 2024-01-01 close Assets:A" in result.render()


class TestFromYaml:
    def test_load(self, tmp_path):
        path = tmp_path / "lima.yaml"
        path.write_text("division_precision: 10\ndivision_rounding: ROUND_UP\nrender_context_lines: 2\n")
        options = ParserOptions.from_yaml(path)
        assert options == ParserOptions(
            division_precision=10, division_rounding=ROUND_UP, render_context_lines=2
        )

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "lima.yaml"
        path.write_text("")
        assert ParserOptions.from_yaml(path) == ParserOptions()

    def test_utf8_file(self, tmp_path):
        path = tmp_path / "lima.yaml"
        path.write_text("# précision des divisions\ndivision_precision: 7\n", encoding="utf-8")
        assert ParserOptions.from_yaml(path).division_precision == 7

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "lima.yaml"
        path.write_text("precision: 10\n")
        with pytest.raises(ValidationError):
            ParserOptions.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "lima.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            ParserOptions.from_yaml(path)
