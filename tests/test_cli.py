"""
Batch front end tests

Tests the CLI pipeline stages over temporary directories, plus the
settings, configuration layering and Pygments lexers they rely on.
"""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError
from pygments.lexers import TextLexer
from pygments.token import Name, Operator, Number, String

from abbrex.__main__ import (
    abbreviations_split,
    env_check,
    sources_read,
    abbreviations_expand,
    results_write,
    results_report,
)
from abbrex.config import resolve_config
from abbrex.config.resolve import DataError, data_load, snippets_split
from abbrex.config.settings import AppSettings
from abbrex.lib.lexer import get_lexer, output_lexer
from abbrex.lib.log import state_connectToLogger
from abbrex.models import ProgramState, pipeline


def run(inputdir: Path, outputdir: Path, **options) -> ProgramState:
    state = ProgramState(inputdir=inputdir, outputdir=outputdir, verbosity=0, **options)
    state_connectToLogger(state)
    return pipeline(state, env_check, sources_read, abbreviations_expand, results_write, results_report)


class TestSplit:
    """Test abbreviation file splitting"""

    def test_one_per_line(self):
        """Blank lines and comments are skipped"""
        assert abbreviations_split("ul>li*2\n\n// nav\na", False) == ["ul>li*2", "a"]

    def test_whole_file(self):
        """Whole file is one abbreviation"""
        assert abbreviations_split("  ul>li\n", True) == ["ul>li"]
        assert abbreviations_split("\n\n", True) == []


class TestPipeline:
    """Test batch expansion end to end"""

    def test_markup_files(self):
        """Each abbreviation file produces one html file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            outputdir = Path(tmpdir) / "out"
            (inputdir / "sub").mkdir(parents=True)
            (inputdir / "page.abbr").write_text("ul>li*2\n\n// link\na\n")
            (inputdir / "sub" / "nav.abbr").write_text("nav>a\n")

            state = run(inputdir, outputdir)

            assert state.envOK
            assert len(state.outputFiles) == 2
            page = (outputdir / "page.html").read_text()
            assert page == '<ul>\n\t<li></li>\n\t<li></li>\n</ul>\n\n<a href=""></a>\n'
            assert (outputdir / "sub" / "nav.html").exists()

    def test_stylesheet_syntax(self):
        """Stylesheet syntax selects the stylesheet pipeline and suffix"""
        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            inputdir.mkdir()
            (inputdir / "style.abbr").write_text("p10\nm5\n")

            run(inputdir, Path(tmpdir) / "out", syntax="css")

            result = (Path(tmpdir) / "out" / "style.css").read_text()
            assert result == "padding: 10px;\n\nmargin: 5px;\n"

    def test_whole_file_option(self):
        """wholeFile expands the file as one abbreviation"""
        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            inputdir.mkdir()
            (inputdir / "page.abbr").write_text("div\n")

            state = run(inputdir, Path(tmpdir) / "out", wholeFile=True)

            assert state.expansions[inputdir / "page.abbr"] == ["<div></div>"]

    def test_missing_input_directory(self):
        """Missing inputdir exits with status 1"""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(SystemExit) as info:
                run(Path(tmpdir) / "nope", Path(tmpdir) / "out")
            assert info.value.code == 1

    def test_invalid_abbreviation(self, capsys):
        """Unparsable abbreviation is reported and exits with status 1"""
        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            inputdir.mkdir()
            (inputdir / "bad.abbr").write_text("ul>li)\n")

            with pytest.raises(SystemExit) as info:
                run(inputdir, Path(tmpdir) / "out")

            assert info.value.code == 1
            assert "cannot expand 'ul>li)'" in capsys.readouterr().err

    def test_highlight_report(self, capsys):
        """--highlight prints every file and expansion"""
        with tempfile.TemporaryDirectory() as tmpdir:
            inputdir = Path(tmpdir) / "in"
            inputdir.mkdir()
            (inputdir / "page.abbr").write_text("p\n")

            run(inputdir, Path(tmpdir) / "out", highlight=True)

            assert "# page.abbr" in capsys.readouterr().out


class TestConfig:
    """Test configuration layering and settings"""

    def test_syntax_overlay(self):
        """Syntax overlay adjusts options"""
        config = resolve_config({"syntax": "xhtml"})
        assert config.type == "markup"
        assert config.options["output.selfClosingStyle"] == "xhtml"

    def test_type_from_syntax(self):
        """Stylesheet syntaxes imply the stylesheet type"""
        assert resolve_config({"syntax": "scss"}).type == "stylesheet"
        assert resolve_config({"type": "stylesheet"}).syntax == "css"

    def test_layer_order(self):
        """Caller tables override globals, syntax globals override type globals"""
        globals_ = {
            "markup": {"snippets": {"foo": "a", "bar": "b"}},
            "html": {"snippets": {"bar": "c"}},
        }
        config = resolve_config({"snippets": {"foo": "d"}}, globals_)
        assert config.snippets["foo"] == "d"
        assert config.snippets["bar"] == "c"

    def test_defaults_not_shared(self):
        """Mutating a resolved table leaves the defaults untouched"""
        config = resolve_config()
        config.options["inlineElements"].append("custom")
        assert "custom" not in resolve_config().options["inlineElements"]

    def test_snippets_split(self):
        """`|` separated keys define aliases"""
        assert snippets_split({"op|opa": "opacity"}) == {"op": "opacity", "opa": "opacity"}

    def test_data_load(self):
        """Bundled tables load, missing ones raise DataError"""
        assert "a" in data_load("snippets-html.yaml")
        with pytest.raises(DataError):
            data_load("missing.yaml")

    def test_settings_from_environment(self, monkeypatch):
        """ABBREX_ variables configure the application"""
        monkeypatch.setenv("ABBREX_DEFAULT_SYNTAX", "xhtml")
        monkeypatch.setenv("ABBREX_LOREM_SEED", "42")
        settings = AppSettings()
        assert settings.syntax_default("markup") == "xhtml"
        assert settings.syntax_default("stylesheet") == "css"
        assert settings.lorem_seed == 42

    def test_settings_score_range(self):
        """Fuzzy score threshold must lie within [0, 1]"""
        with pytest.raises(ValidationError):
            AppSettings(fuzzy_min_score=1.5)


class TestLexer:
    """Test Pygments lexers used by the highlight report"""

    def test_markup_tokens(self):
        """Tags, operators and repeaters get their token types"""
        tokens = list(get_lexer().get_tokens("ul>li*3"))
        assert (Name.Tag, "ul") in tokens
        assert (Operator, ">") in tokens
        assert (Number, "*3") in tokens

    def test_text_node(self):
        """Text nodes are strings"""
        tokens = list(get_lexer().get_tokens("p{Hi}"))
        assert (String, "Hi") in tokens

    def test_stylesheet_lexer(self):
        """Stylesheet abbreviations use their own lexer"""
        tokens = list(get_lexer(stylesheet=True).get_tokens("p10"))
        assert (Number, "10") in tokens

    def test_output_lexer_fallback(self):
        """Unknown syntax falls back to plain text"""
        assert isinstance(output_lexer("no-such-syntax"), TextLexer)
        assert output_lexer("html").name == "HTML"
