#!/usr/bin/env python3
"""
fileinjector - Recursive file injection with source maps

Flattens a document containing "inject this other file here" directives
into a single output document, and optionally writes a source map tracing
every output position back to the file, line and column it came from.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directive syntaxes (built in):
    $file(path, ifAbsent=fail|empty|keep, transform=name)
    /*! $file(...) */        //! $file(...)        <!-- $file(...) -->
    <file path="...">        <!-- <file path="..."/> -->   /*! <file .../> */

Usage:
    fileinjector inputdir/ outputdir/ --inputFile index.html

Examples:
    # Flatten with a source map next to the output
    fileinjector src/ dist/ --inputFile app.js --sourceMap

    # Extra delimiters from a YAML file, verbose output
    fileinjector src/ dist/ --inputFile page.md --delimitersFile inject.yaml -vv
"""

import sys
import traceback
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    FileInjector,
    FileSystemReader,
    InjectionError,
    delimiters_load,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, SourceDocument, pipeline


DISPLAY_TITLE = r"""
   __ _ _        _       _           _
  / _(_) | ___  (_)_ __ (_) ___  ___| |_ ___  _ __
 | |_| | |/ _ \ | | '_ \| |/ _ \/ __| __/ _ \| '__|
 |  _| | |  __/ | | | | | |  __/ (__| || (_) | |
 |_| |_|_|\___| |_|_| |_/ |\___|\___|\__\___/|_|
                      |__/
  Recursive file injection with source maps
"""

# Define CLI arguments
parser = ArgumentParser(
    description="fileinjector - flatten $file(...) directives into one document",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input document (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default="",
    type=str,
    help="Output document (relative to outputdir). Defaults to the inputFile name",
)

parser.add_argument(
    "--sourceMap",
    action="store_true",
    default=False,
    help="Also write the source map next to the output document",
)

parser.add_argument(
    "--delimitersFile",
    default=None,
    type=str,
    help=f"YAML file with extra delimiters. Defaults to inputdir/{appsettings.delimiters_file} if present",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity: -v logs every injected file, -vv every match",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Verifies that the input file exists, loads extra delimiter definitions
    and creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - outputTargetFile: Path the flattened document is written to
            - delimiters: Extra delimiter definitions
            - envOK: True if environment is valid

    Exits:
        1 if the input file is missing or the delimiter file is invalid
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    # Explicit delimiter file must exist; the default one is optional
    if state.delimitersFile:
        delimiters_path = Path(state.delimitersFile)
        if not delimiters_path.is_absolute():
            delimiters_path = state.inputdir / delimiters_path
        if not delimiters_path.is_file():
            print(f"Error: Delimiters file not found: {delimiters_path}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
    else:
        delimiters_path = state.inputdir / appsettings.delimiters_file

    if delimiters_path.is_file():
        try:
            state.delimiters = delimiters_load(delimiters_path)
        except InjectionError as e:
            print(f"Error: {e}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        LOG(f"Loaded {len(state.delimiters)} extra delimiters from {delimiters_path}", level=2)

    state.outputTargetFile = state.outputdir / (state.outputFile or state.inputFile)
    state.outputTargetFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.outputTargetFile}", level=2)

    state.envOK = True
    return state


def source_unfold(inputstate: ProgramState) -> ProgramState:
    """
    Read the input document and flatten all of its directives.

    Args:
        inputstate: Program state with inputSourceFile and delimiters set

    Returns:
        ProgramState with added field:
            - unfoldResult: ProcessResult (text and source map)

    Exits:
        1 if reading fails or injection raises
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        contents = state.inputSourceFile.read_bytes()
        LOG(f"Read {len(contents)} bytes from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Injecting files...", level=1)
    injector = FileInjector(
        cwd=str(state.inputdir),
        delimiters=state.delimiters,
        reader=FileSystemReader(),
    )
    document = SourceDocument(path=str(state.inputSourceFile.resolve()), contents=contents)
    try:
        state.unfoldResult = injector.process(document, file=state.outputTargetFile.name)
    except InjectionError as e:
        print(f"Injection error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            traceback.print_exc()
        sys.exit(1)

    LOG(f"Mapped {len(state.unfoldResult.positionMap.sources)} source files", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the flattened document and, if requested, its source map.

    Args:
        inputstate: Program state with unfoldResult

    Returns:
        ProgramState with added field:
            - writeResult: Dict containing:
                - output_file: str
                - sourcemap_file: Optional[str]
                - source_count: int
    """

    state = inputstate.copy()

    if not state.unfoldResult:
        print("Error: No flattened document available", file=sys.stderr)
        sys.exit(1)

    state.outputTargetFile.write_bytes(
        state.unfoldResult.text.encode(appsettings.encoding)
    )
    LOG(f"Wrote {state.outputTargetFile}", level=2)

    sourcemap_file = None
    if state.sourceMap:
        sourcemap_path = state.outputTargetFile.with_name(
            state.outputTargetFile.name + appsettings.sourcemap_suffix
        )
        sourcemap_path.write_text(state.unfoldResult.positionMap.json_dump(), encoding="utf-8")
        sourcemap_file = str(sourcemap_path)
        LOG(f"Wrote {sourcemap_path}", level=2)

    state.writeResult = {
        'output_file': str(state.outputTargetFile),
        'sourcemap_file': sourcemap_file,
        'source_count': len(state.unfoldResult.positionMap.sources),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Args:
        inputstate: Program state with writeResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Injection failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Injection successful!", level=1)
    LOG(f"  Output: {state.writeResult['output_file']}", level=1)
    if state.writeResult['sourcemap_file']:
        LOG(f"  Source map: {state.writeResult['sourcemap_file']}", level=1)
    LOG(f"  Sources: {state.writeResult['source_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="fileinjector - Recursive file injection with source maps",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - flatten a document and write the result.

    Orchestrates the full pipeline:
        1. env_check: Validate paths, load extra delimiters
        2. source_unfold: Read and flatten the input document
        3. output_write: Write the document and source map
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source documents
        outputdir: Directory where the flattened document is written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_unfold, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
