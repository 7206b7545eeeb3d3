"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from pathlib import Path
from argparse import Namespace
from functools import reduce
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the injection pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          sourceMap, delimitersFile
        - env_check: inputSourceFile, outputTargetFile, delimiters, envOK
        - source_unfold: unfoldResult
        - output_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Base output directory for the flattened document
        verbosity: Logging verbosity level (1-3)
        inputFile: Input filename (relative to inputdir)
        outputFile: Output filename (relative to outputdir), defaults to inputFile
        sourceMap: Also write the position mapping next to the output
        delimitersFile: Optional YAML file with extra delimiter definitions
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input document
        outputTargetFile: Resolved path of the flattened document
        delimiters: Extra delimiter definitions loaded from delimitersFile
        unfoldResult: ProcessResult from the injector
        writeResult: Written files and statistics
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: str = field(default="")
    sourceMap: bool = field(default=False)
    delimitersFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputTargetFile: Path = field(default=Path("/"))
    delimiters: List[Any] = field(default_factory=list)  # List[DelimiterDefinition] at runtime
    unfoldResult: Optional[Any] = field(default=None)   # ProcessResult at runtime
    writeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, sourceMap, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for the flattened output

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
            source_unfold,
            output_write,
            results_report
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
