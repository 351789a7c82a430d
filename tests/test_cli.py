"""
Tests for the bard CLI.
"""

import argparse
import re

import pytest

from bard.cli import create_parser, main, parts_count
from bard.config import DEFAULT_MODEL, DEFAULT_TITLE, EXIT_FATAL, EXIT_SUCCESS


class TestPartsCount:
    """Tests for parts_count argument type."""

    def test_accepts_four_or_more(self):
        """4 and above are valid."""
        assert parts_count("4") == 4
        assert parts_count("12") == 12

    @pytest.mark.parametrize("value", ["3", "0", "-1"])
    def test_rejects_three_or_fewer(self, value):
        """3 or fewer parts is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="at least 4 parts"):
            parts_count(value)

    def test_rejects_non_integer(self):
        """Non-numeric values are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parts_count("many")


class TestCreateParser:
    """Tests for create_parser function."""

    def test_global_defaults(self):
        """--title and --model have defaults."""
        args = create_parser().parse_args(["prepare", "--seedfile", "seed.txt"])
        assert args.title == DEFAULT_TITLE
        assert args.model == DEFAULT_MODEL
        assert args.strict_model is False

    @pytest.mark.parametrize("flag", ["-n", "--num_chapters", "--num_parts"])
    def test_part_count_flags(self, flag):
        """All part-count spellings set num_parts."""
        args = create_parser().parse_args(["generate", flag, "7", "--plotfile", "plot.txt"])
        assert args.num_parts == 7

    def test_generate_defaults(self):
        """generate defaults to four quiet parts."""
        args = create_parser().parse_args(["generate", "--plotfile", "plot.txt"])
        assert args.num_parts == 4
        assert args.verbose is False

    def test_required_flags(self):
        """Each command requires its input file."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["prepare"])
        with pytest.raises(SystemExit):
            parser.parse_args(["generate"])
        with pytest.raises(SystemExit):
            parser.parse_args(["convert", "--mdfile", "story.md"])


class TestMain:
    """End-to-end tests for main with a fake provider."""

    def test_prepare(self, work_root, console, fake_factories):
        """prepare writes plots/<title-slug>.txt."""
        seed = work_root / "seed.txt"
        seed.write_text("A lighthouse at the end of the world.", encoding="utf-8")

        code = main(
            ["--title", "The Lighthouse", "prepare", "--seedfile", str(seed)],
            console=console, factories=fake_factories
        )

        assert code == EXIT_SUCCESS
        plot = work_root / "plots" / "the-lighthouse.txt"
        assert plot.read_text(encoding="utf-8").startswith("Plot elaborated")
        assert "generated in" in console.file.getvalue()

    def test_generate(self, work_root, console, fake_factories):
        """generate writes md/<title-slug>.md with N sections."""
        plot = work_root / "plot.txt"
        plot.write_text("The plot.", encoding="utf-8")

        code = main(
            ["--title", "The Lighthouse", "generate", "-n", "5", "--plotfile", str(plot)],
            console=console, factories=fake_factories
        )

        assert code == EXIT_SUCCESS
        story = (work_root / "md" / "the-lighthouse.md").read_text(encoding="utf-8")
        assert len(re.findall(r"^# ", story, re.MULTILINE)) == 5

    def test_generate_rejects_three_parts(self, work_root, console, fake_provider, fake_factories):
        """-n 3 is a usage error and no provider is called."""
        plot = work_root / "plot.txt"
        plot.write_text("The plot.", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "-n", "3", "--plotfile", str(plot)], console=console, factories=fake_factories)

        assert exc_info.value.code == 2
        assert fake_provider.prompts == []

    def test_generate_failure_exit_code(self, work_root, console, fake_provider, fake_factories):
        """A completion failure exits with a fatal status."""
        plot = work_root / "plot.txt"
        plot.write_text("The plot.", encoding="utf-8")
        fake_provider.fail_on_call = 2

        code = main(["generate", "--plotfile", str(plot)], console=console, factories=fake_factories)

        assert code == EXIT_FATAL
        assert "Error:" in console.file.getvalue()
        assert not (work_root / "md" / "my-ai-generated-story.md").exists()

    def test_convert(self, work_root, console):
        """convert writes html/<outputfile> using output.template."""
        (work_root / "output.template").write_text("<body>%s</body>", encoding="utf-8")
        md = work_root / "story.md"
        md.write_text("# Chapter One\n\nText.", encoding="utf-8")

        code = main(
            ["convert", "--mdfile", str(md), "--outputfile", "story.html"],
            console=console
        )

        assert code == EXIT_SUCCESS
        html = (work_root / "html" / "story.html").read_text(encoding="utf-8")
        assert html.startswith("<body>")
        assert html.endswith("</body>")
        assert 'id="chapter-one"' in html

    def test_convert_missing_template(self, work_root, console):
        """A missing template is fatal."""
        md = work_root / "story.md"
        md.write_text("# Chapter One", encoding="utf-8")

        code = main(["convert", "--mdfile", str(md), "--outputfile", "story.html"], console=console)

        assert code == EXIT_FATAL
        assert not (work_root / "html" / "story.html").exists()

    def test_missing_env_file(self, tmp_path, monkeypatch, console, fake_provider, fake_factories):
        """Without a .env file nothing runs."""
        monkeypatch.setenv("BARD_WORKDIR", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        seed = tmp_path / "seed.txt"
        seed.write_text("idea", encoding="utf-8")

        code = main(["prepare", "--seedfile", str(seed)], console=console, factories=fake_factories)

        assert code == EXIT_FATAL
        assert "Environment file not found" in console.file.getvalue()
        assert fake_provider.prompts == []

    def test_startup_creates_directories(self, work_root, console):
        """md/, plots/ and html/ are created on startup."""
        md = work_root / "story.md"
        md.write_text("# Title", encoding="utf-8")

        main(["convert", "--mdfile", str(md), "--outputfile", "out.html"], console=console)

        for name in ("md", "plots", "html"):
            assert (work_root / name).is_dir()

    def test_strict_model_rejects_unknown(self, work_root, console, fake_provider, fake_factories):
        """--strict-model refuses names without a provider prefix."""
        seed = work_root / "seed.txt"
        seed.write_text("idea", encoding="utf-8")

        code = main(
            ["--strict-model", "-m", "mystery-model", "prepare", "--seedfile", str(seed)],
            console=console, factories=fake_factories
        )

        assert code == EXIT_FATAL
        assert "Unsupported model" in console.file.getvalue()
        assert fake_provider.prompts == []

    def test_no_command_prints_help(self, capsys):
        """Running without a command shows usage."""
        assert main([]) == EXIT_SUCCESS
        assert "usage: bard" in capsys.readouterr().out
