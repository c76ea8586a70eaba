"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing CLI stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the batch expansion pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, syntax, type, pattern,
          wholeFile, highlight
        - env_check: inputFiles, envOK
        - sources_read: sources
        - abbreviations_expand: expansions
        - results_write: outputFiles
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory searched for abbreviation files
        outputdir: Directory receiving expanded files
        verbosity: Logging verbosity level (1-3)
        syntax: Output syntax (html, pug, css...); None for the type default
        type: Abbreviation type, markup or stylesheet; None to infer from syntax
        pattern: Glob selecting input files under inputdir
        wholeFile: Treat each file as one abbreviation instead of one per line
        highlight: Print each abbreviation and its expansion with Pygments
        envOK: Environment validation passed
        inputFiles: Input files found under inputdir
        sources: Abbreviations per input file
        expansions: Expanded text per abbreviation, per input file
        outputFiles: Files written to outputdir
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    syntax: Optional[str] = field(default=None)
    type: Optional[str] = field(default=None)
    pattern: str = field(default="**/*.abbr")
    wholeFile: bool = field(default=False)
    highlight: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputFiles: List[Path] = field(default_factory=list)
    sources: Dict[Path, List[str]] = field(default_factory=dict)
    expansions: Dict[Path, List[str]] = field(default_factory=dict)
    outputFiles: List[Path] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (syntax, type, wholeFile, etc.)
            inputdir: Directory containing abbreviation files
            outputdir: Directory for expanded output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)

    def config_get(self) -> Dict[str, Any]:
        """Caller config passed to ``expand`` for every abbreviation"""
        config: Dict[str, Any] = {}
        if self.syntax:
            config["syntax"] = self.syntax
        if self.type:
            config["type"] = self.type
        return config


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_read,
            abbreviations_expand,
            results_write,
            results_report
        )

    This is equivalent to:
        results_report(results_write(abbreviations_expand(sources_read(env_check(initial_state)))))

    But reads left-to-right instead of inside-out.
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
