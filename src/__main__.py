#!/usr/bin/env python3
"""
hidemark - Hidden-content directives for plain text notes

Authors mark parts of a note as hidden while composing:

    Meet at :::hide{text=Where?} the old mill::: on Friday.

    :::hide{level=high}
    Door code 4711
    :::

Before a note is stored, every hidden region collapses to a payload-free
placeholder token ([hide-inline], [hide-block{level:high}]).
Stored notes resolve back to hidden nodes for display, and keyword search
runs against the visible text only.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Modes:
    - encode: Write each note with hidden regions replaced by placeholders
    - resolve: Write each note's resolved node tree (JSON) and HTML preview
    - search: Write matches.json naming the notes that satisfy --filter
    - highlight: Write a syntax-highlighted HTML view of each note's source

Usage:
    hidemark inputdir/ outputdir/ --inputFile '*.md' --mode encode

Examples:
    # Encode every markdown note in a directory tree
    hidemark notes/ stored/ --inputFile '**/*.md'

    # Render stored notes, revealing hidden payloads still in raw form
    hidemark notes/ preview/ --mode resolve --reveal

    # Find notes whose visible text contains both keywords
    hidemark stored/ out/ --mode search \\
        --filter 'content.contains("budget")' --filter 'content.contains("2026")'

    # Verbose output
    hidemark notes/ stored/ -vv
"""

import sys
import json
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import (
    DirectiveEncoder,
    SearchFilter,
    document_resolve,
    document_segment,
    source_highlight,
    HtmlRenderer,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _     _     _                          _
 | |__ (_) __| | ___ _ __ ___   __ _ _ __| | __
 | '_ \| |/ _` |/ _ \ '_ ` _ \ / _` | '__| |/ /
 | | | | | (_| |  __/ | | | | | (_| | |  |   <
 |_| |_|_|\__,_|\___|_| |_| |_|\__,_|_|  |_|\_\

  Hidden-content directives for plain text notes
"""

MODES = ["encode", "resolve", "search", "highlight"]

# Define CLI arguments
parser = ArgumentParser(
    description="hidemark - Hidden-content directives for plain text notes",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", default="*.md", type=str, help="Glob selecting note files (relative to inputdir)"
)

parser.add_argument(
    "--mode", default="encode", choices=MODES, help="Processing applied to each note"
)

parser.add_argument(
    "--filter",
    action="append",
    default=None,
    type=str,
    help='Search predicate, e.g. \'content.contains("word")\' (search mode, repeatable)',
)

parser.add_argument(
    "--reveal",
    action="store_true",
    default=False,
    help="Include hidden payloads in rendered HTML (resolve mode)",
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
    Validate environment and resolve note paths.

    Verifies that the input directory exists and the inputFile glob selects
    at least one note, then creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputFiles: Sorted list of matching note paths
            - envOK: True if environment is valid

    Exits:
        1 if inputdir is missing, mode is unknown or no note matches
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not Path(state.inputdir).is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.mode not in MODES:
        print(f"Error: Unknown mode '{state.mode}' (expected one of {', '.join(MODES)})", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    inputdir = Path(state.inputdir)
    state.inputFiles = sorted(path for path in inputdir.glob(state.inputFile) if path.is_file())
    if not state.inputFiles:
        print(f"Error: No notes match {state.inputFile} in {inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Found {len(state.inputFiles)} note(s) matching {state.inputFile}", level=2)

    Path(state.outputdir).mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def notes_read(inputstate: ProgramState) -> ProgramState:
    """
    Read every selected note into memory.

    Args:
        inputstate: Program state with inputFiles set

    Returns:
        ProgramState with added field:
            - notes: Dict mapping path relative to inputdir -> note text

    Exits:
        1 if a note cannot be read
    """

    state = inputstate.copy()

    LOG("Reading notes...", level=1)

    notes = {}
    for path in state.inputFiles:
        name = path.relative_to(state.inputdir).as_posix()
        try:
            notes[name] = path.read_text(encoding="utf-8")
        except Exception as e:
            print(f"Error reading note {path}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Read {len(notes[name])} characters from {name}", level=3)

    state.notes = notes
    LOG(f"Read {len(notes)} note(s)", level=2)
    return state


def note_encode(name: str, text: str, state: ProgramState) -> dict:
    """Encoded note, same relative name"""
    return {name: DirectiveEncoder().content_encode(text)}


def note_resolve(name: str, text: str, state: ProgramState) -> dict:
    """Resolved node tree as JSON plus an HTML preview"""
    nodes = document_resolve(document_segment(text))
    stem = str(Path(name).with_suffix(""))
    html = HtmlRenderer(reveal=state.reveal).nodes_render(nodes)
    return {
        f"{stem}.json": json.dumps([node.to_dict() for node in nodes], indent=2) + "\n",
        f"{stem}.html": html + "\n",
    }


def note_highlight(name: str, text: str, state: ProgramState) -> dict:
    """Highlighted HTML view of the note source"""
    stem = str(Path(name).with_suffix(""))
    return {f"{stem}.html": source_highlight(text, title=name)}


def notes_search(state: ProgramState) -> dict:
    """
    Match every note against the --filter predicates.

    Notes are encoded first, so raw hidden payloads in the input are never
    searchable either.
    """
    encoder = DirectiveEncoder()
    search = SearchFilter()
    matches = [
        name
        for name, text in state.notes.items()
        if search.content_matches(encoder.content_encode(text), state.filter)
    ]
    LOG(f"{len(matches)} of {len(state.notes)} note(s) match", level=2)
    return {"matches.json": json.dumps({"filter": state.filter, "matches": matches}, indent=2) + "\n"}


NOTE_HANDLERS = {
    "encode": note_encode,
    "resolve": note_resolve,
    "highlight": note_highlight,
}


def notes_process(inputstate: ProgramState) -> ProgramState:
    """
    Apply the selected mode to the notes and write the results.

    Args:
        inputstate: Program state with notes populated

    Returns:
        ProgramState with added fields:
            - outputs: Dict mapping path relative to outputdir -> content
            - processResult: Dict containing:
                - status: bool (processing success)
                - mode: str
                - note_count: int
                - written: List[str] (output files, relative to outputdir)
                - matches: List[str] (search mode only)

    Exits:
        1 if processing or writing fails
    """

    state = inputstate.copy()

    LOG(f"Processing notes ({state.mode})...", level=1)

    try:
        outputs = {}
        if state.mode == "search":
            outputs.update(notes_search(state))
        else:
            handler = NOTE_HANDLERS[state.mode]
            for name, text in state.notes.items():
                outputs.update(handler(name, text, state))

        written = []
        for name, content in outputs.items():
            target = Path(state.outputdir) / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            written.append(name)
            LOG(f"Wrote {target}", level=3)
    except Exception as e:
        print(f"Processing error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.outputs = outputs
    state.processResult = {
        "status": True,
        "mode": state.mode,
        "note_count": len(state.notes),
        "written": written,
    }
    if state.mode == "search":
        state.processResult["matches"] = json.loads(outputs["matches.json"])["matches"]
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display processing results to user.

    Args:
        inputstate: Program state with processResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if processResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.processResult:
        print("Error: Processing failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG(f"\n✓ {state.processResult['mode'].capitalize()} successful!", level=1)
        LOG(f"  Notes:   {state.processResult['note_count']}", level=1)
        LOG(f"  Written: {len(state.processResult['written'])} file(s) in {state.outputdir}", level=1)
        if "matches" in state.processResult:
            LOG(f"  Matches: {', '.join(state.processResult['matches']) or '(none)'}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="hidemark - Hidden-content directives for plain text notes",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - process note files with hidden-content directives.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and select notes
        2. notes_read: Read the notes
        3. notes_process: Encode, resolve, search or highlight
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - inputFile: str - Glob selecting notes
            - mode: str - encode, resolve, search or highlight
            - filter: Optional[List[str]] - Search predicates
            - reveal: bool - Reveal hidden payloads in HTML
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing note files
        outputdir: Directory where results will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, notes_read, notes_process, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
