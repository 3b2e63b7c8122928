"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the command line pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, mode, filter, reveal
        - env_check: inputFiles, envOK
        - notes_read: notes
        - notes_process: outputs, processResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing note files
        outputdir: Directory for processed output
        verbosity: Logging verbosity level (1-3)
        inputFile: Glob pattern selecting notes (relative to inputdir)
        mode: One of encode, resolve, search, highlight
        filter: Search predicates (search mode)
        reveal: Include hidden payloads in rendered HTML (resolve mode)
        envOK: Environment validation passed
        inputFiles: Resolved note paths
        notes: Note text keyed by path relative to inputdir
        outputs: Output file contents keyed by path relative to outputdir
        processResult: Summary (status, mode, note_count, written, matches)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="*.md")
    mode: str = field(default="encode")
    filter: List[str] = field(default_factory=list)
    reveal: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputFiles: List[Path] = field(default_factory=list)
    notes: Dict[str, str] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)
    processResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, mode, filter, etc.)
            inputdir: Directory containing note files
            outputdir: Directory for output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that are ProgramState fields; unset list options
        # arrive as None from argparse
        filtered_options = {
            k: v for k, v in options_dict.items() if k in valid_fields and v is not None
        }

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            notes_read,
            notes_process,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
