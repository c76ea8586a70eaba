#!/usr/bin/env python3
"""
abbrex - Emmet-style abbreviation expander

Batch front end: expands every abbreviation file found under an input
directory and writes the expanded markup or stylesheet code into an
output directory, mirroring the input tree.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Input format:
    One abbreviation per non-empty line (`ul>li.item$*3`, `m10+p5`), or
    the whole file as a single abbreviation with --wholeFile. Lines
    starting with `//` are skipped.

Usage:
    abbrex inputdir/ outputdir/ [--syntax pug] [--type stylesheet]

    For `inputdir/page.abbr` the expansion is written to
    `outputdir/page.<syntax>`, one expansion per abbreviation separated by
    blank lines.

Examples:
    # Expand markup abbreviations to HTML
    abbrex in/ out/

    # Stylesheet abbreviations as SCSS, echoing highlighted results
    abbrex in/ out/ --syntax scss --highlight

    # Whole-file abbreviations, verbose
    abbrex in/ out/ --wholeFile -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List

from chris_plugin import chris_plugin
from pygments import highlight
from pygments.formatters import TerminalFormatter

from . import __version__
from .lib import expand, AbbreviationError, LOG, state_connectToLogger
from .lib.lexer import get_lexer, output_lexer
from .config import resolve_config
from .models import ProgramState, pipeline


COMMENT_PREFIX = "//"

# Define CLI arguments
parser = ArgumentParser(
    description="abbrex - Expand Emmet-style abbreviations into markup and stylesheets",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--syntax",
    default=None,
    type=str,
    help="Output syntax: html, xhtml, xml, xsl, jsx, pug, haml, slim, css, scss, sass, less, stylus, sss",
)

parser.add_argument(
    "--type",
    default=None,
    choices=["markup", "stylesheet"],
    help="Abbreviation type. Inferred from --syntax when omitted",
)

parser.add_argument(
    "--pattern",
    default="**/*.abbr",
    type=str,
    help="Glob selecting abbreviation files under inputdir",
)

parser.add_argument(
    "--wholeFile",
    action="store_true",
    default=False,
    help="Treat each input file as a single abbreviation",
)

parser.add_argument(
    "--highlight",
    action="store_true",
    default=False,
    help="Print each abbreviation and its expansion with syntax highlighting",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and collect input files.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputFiles: Sorted abbreviation files under inputdir
            - envOK: True if environment is valid

    Exits:
        1 if inputdir does not exist
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputFiles = sorted(p for p in state.inputdir.glob(state.pattern) if p.is_file())
    LOG(f"Found {len(state.inputFiles)} files matching '{state.pattern}' in {state.inputdir}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def abbreviations_split(source: str, wholeFile: bool) -> List[str]:
    """
    Split file contents into abbreviations

    Example:
        >>> abbreviations_split("ul>li*2\\n\\n// nav\\na", False)
        ['ul>li*2', 'a']
    """
    if wholeFile:
        text = source.strip()
        return [text] if text else []
    lines = (line.strip() for line in source.splitlines())
    return [line for line in lines if line and not line.startswith(COMMENT_PREFIX)]


def sources_read(inputstate: ProgramState) -> ProgramState:
    """
    Read abbreviation files.

    Returns:
        ProgramState with added field:
            - sources: Abbreviations per input file

    Exits:
        1 if a file cannot be read
    """
    state = inputstate.copy()
    state.sources = {}

    LOG("Reading abbreviation files...", level=1)
    for path in state.inputFiles:
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error reading input file: {e}", file=sys.stderr)
            sys.exit(1)
        state.sources[path] = abbreviations_split(source, state.wholeFile)
        LOG(f"Read {len(state.sources[path])} abbreviations from {path.name}", level=2)
    return state


def abbreviations_expand(inputstate: ProgramState) -> ProgramState:
    """
    Expand every abbreviation read.

    Returns:
        ProgramState with added field:
            - expansions: Expanded text per abbreviation, per input file

    Exits:
        1 on the first abbreviation that does not parse
    """
    state = inputstate.copy()
    state.expansions = {}
    config = resolve_config(state.config_get())

    LOG(f"Expanding as {config.type}/{config.syntax}...", level=1)
    for path, abbreviations in state.sources.items():
        results: List[str] = []
        for abbr in abbreviations:
            try:
                results.append(expand(abbr, config))
            except AbbreviationError as e:
                print(f"{path}: cannot expand '{abbr}'", file=sys.stderr)
                print(str(e), file=sys.stderr)
                sys.exit(1)
        state.expansions[path] = results
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write expansions to outputdir, mirroring the input tree.

    Returns:
        ProgramState with added field:
            - outputFiles: Files written
    """
    state = inputstate.copy()
    state.outputFiles = []
    syntax = resolve_config(state.config_get()).syntax

    for path, results in state.expansions.items():
        target = (state.outputdir / path.relative_to(state.inputdir)).with_suffix(f".{syntax}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n\n".join(results) + "\n" if results else "", encoding="utf-8")
        state.outputFiles.append(target)
        LOG(f"Wrote {len(results)} expansions to {target}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display expansion results.

    With --highlight every abbreviation and its expansion is printed to
    stdout, coloured with Pygments.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    config = resolve_config(state.config_get())

    if state.highlight:
        formatter = TerminalFormatter()
        source_lexer = get_lexer(stylesheet=config.stylesheet_is())
        target_lexer = output_lexer(config.syntax)
        for path, abbreviations in state.sources.items():
            print(f"# {path.relative_to(state.inputdir)}")
            for abbr, result in zip(abbreviations, state.expansions.get(path, [])):
                sys.stdout.write(highlight(abbr, source_lexer, formatter))
                sys.stdout.write(highlight(result, target_lexer, formatter))
                print()

    count = sum(len(results) for results in state.expansions.values())
    LOG(f"✓ Expanded {count} abbreviations into {len(state.outputFiles)} files", level=1)
    for target in state.outputFiles:
        LOG(f"  Output: {target}", level=2)
    return state


@chris_plugin(
    parser=parser,
    title="abbrex - Abbreviation expander",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - expand abbreviation files from inputdir into outputdir.

    Orchestrates the pipeline:
        1. env_check: Validate paths, collect files
        2. sources_read: Read abbreviations
        3. abbreviations_expand: Expand them
        4. results_write: Write expanded files
        5. results_report: Display results

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, sources_read, abbreviations_expand, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
