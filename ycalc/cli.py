import argparse
import json
import os
import sys
import time

from .evaluator import build_environment
from .exceptions import YCalcError
from .pipeline import EvaluationPipeline, evaluate_expression
from .utils import ArtifactEncoder, TerminalColors, format_diagnostic

# This provides a single source of truth for stage names and their order.
STAGE_MAP = {
    "1": ("tokens", "Token Stream"),
    "2": ("ast", "Abstract Syntax Tree"),
    "3": ("value", "Value"),
}


def _parse_constant(definition: str, parser: argparse.ArgumentParser):
    """Turns a `NAME=EXPRESSION` command line definition into a (name, value) pair."""
    name, sep, expression = definition.partition("=")
    if not sep or not name.strip() or not expression.strip():
        parser.error(f"invalid constant definition '{definition}', expected NAME=EXPRESSION")
    try:
        return name.strip(), evaluate_expression(expression)
    except YCalcError as e:
        _report_error(e, expression)
        sys.exit(1)


def _report_error(error: YCalcError, source: str):
    print(f"{TerminalColors.RED}--- {error.kind.value} ---{TerminalColors.RESET}", file=sys.stderr)
    print(f"{TerminalColors.RED}error: {error.message}{TerminalColors.RESET}", file=sys.stderr)
    diagnostic = format_diagnostic(source, error.span)
    if diagnostic:
        print(diagnostic, file=sys.stderr)


def main(argv=None):
    start_time = time.perf_counter()

    # Dynamically generate help text for the --compile argument
    stage_help_text = "Stop after a specific stage and save its artifact as JSON. "
    for key, (name, desc) in STAGE_MAP.items():
        stage_help_text += f"'{key}' for {desc}. "
    stage_help_text += "Omitting this flag evaluates the expression and prints its value."

    parser = argparse.ArgumentParser(prog="ycalc", description="Evaluate an arithmetic or boolean expression.")
    parser.add_argument(
        "expression",
        nargs="?",
        default=None,
        help="The expression to evaluate. Omit to read it from --file or stdin.",
    )
    parser.add_argument("-f", "--file", dest="input_file", help="Read the expression from a file.")
    parser.add_argument("-c", "--compile", type=str, choices=STAGE_MAP.keys(), help=stage_help_text)
    parser.add_argument("--json", action="store_true", help="Print the value as JSON instead of its plain rendering.")
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="NAME=EXPRESSION",
        help="Define an extra constant. The right-hand side is itself evaluated. May be repeated.",
    )
    parser.add_argument("--time", action="store_true", help="Print the total execution time to stderr.")

    args = parser.parse_args(argv)

    # --- Input Validation ---
    if args.expression is not None and args.input_file:
        parser.error("give either an expression or --file, not both.")
    if args.expression is None and not args.input_file and sys.stdin.isatty():
        parser.error("an expression is required when not reading from a pipe.")

    source = ""
    try:
        # --- Read Input ---
        if args.expression is not None:
            source = args.expression
            file_path = None
        elif args.input_file:
            file_path = os.path.abspath(args.input_file)
            with open(file_path, "r", encoding="utf-8") as f:
                source = f.read()
        else:
            source = sys.stdin.read()
            file_path = None

        constants = {}
        for definition in args.define:
            name, value = _parse_constant(definition, parser)
            constants[name] = value
        try:
            build_environment(constants)
        except ValueError as e:
            parser.error(str(e))

        # --- Determine Pipeline Stop Point ---
        stop_after_stage = None
        if args.compile:
            stop_after_stage, stage_desc = STAGE_MAP[args.compile]
        dump_stages = [stop_after_stage] if stop_after_stage else []

        # --- Run Evaluation ---
        pipeline = EvaluationPipeline(
            source,
            constants=constants,
            file_path=file_path,
            dump_stages=dump_stages,
            stop_after_stage=stop_after_stage,
        )
        result = pipeline.run()

        # --- Handle Output ---
        if stop_after_stage:
            output_path = pipeline.saved_artifacts[stop_after_stage]
            print(f"{TerminalColors.GREEN}--- Stage '{args.compile} ({stage_desc})' saved to {output_path} ---{TerminalColors.RESET}")
        elif args.json:
            print(json.dumps(result, indent=2, cls=ArtifactEncoder))
        else:
            print(result.render())

    # --- Error Handling ---
    except YCalcError as e:
        _report_error(e, source)
        sys.exit(1)
    except FileNotFoundError:
        print(
            f"{TerminalColors.RED}ERROR: Expression file '{args.input_file}' not found.{TerminalColors.RESET}",
            file=sys.stderr,
        )
        sys.exit(1)
    except Exception as e:
        print(
            f"\n{TerminalColors.RED}--- UNEXPECTED EVALUATOR ERROR ---{TerminalColors.RESET}",
            file=sys.stderr,
        )
        print("This may be a bug in ycalc. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        # --- Execution Time ---
        if args.time:
            duration = time.perf_counter() - start_time
            print(f"{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}", file=sys.stderr)


if __name__ == "__main__":
    main()
