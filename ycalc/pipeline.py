import json
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .evaluator import Evaluator
from .lexer import tokenize
from .parser import parse_expression
from .utils import ArtifactEncoder

# Stage names in the order they run.
STAGES = ("tokens", "ast", "value")


class EvaluationPipeline:
    """
    Orchestrates the full process from source text to value.
    This class manages the flow of data between the stages and can stop after
    any of them, optionally saving the intermediate artifacts as JSON.
    """

    def __init__(
        self,
        source_content: str,
        constants: Optional[Mapping[str, object]] = None,
        file_path: Optional[str] = None,
        dump_stages: Sequence[str] = (),
        stop_after_stage: Optional[str] = None,
    ):
        for stage in list(dump_stages) + ([stop_after_stage] if stop_after_stage else []):
            if stage not in STAGES:
                raise ValueError(f"Unknown stage '{stage}'. Expected one of: {', '.join(STAGES)}")

        self.source_content = source_content
        self.constants = constants
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.dump_stages = dump_stages
        self.stop_after_stage = stop_after_stage
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []
        self.saved_artifacts: Dict[str, str] = {}

    def run(self) -> Any:
        """
        Executes the pipeline stage by stage and returns the last artifact.
        Errors from the engine propagate unchanged to the caller.
        """
        # --- Stage 1: Tokens ---
        # Lexed separately so the token stream can be inspected; the parser
        # re-lexes the source through its Lark adapter.
        self._run_simple_stage("tokens", tokenize, self.source_content)
        if self.stop_after_stage == "tokens":
            return self.results[-1]

        # --- Stage 2: Parsing ---
        self._run_simple_stage("ast", parse_expression, self.source_content)
        if self.stop_after_stage == "ast":
            return self.results[-1]

        # --- Stage 3: Evaluation ---
        # The input is the AST from the previous stage
        self._run_simple_stage("value", Evaluator(self.constants).eval, self.results[-1])
        return self.results[-1]

    def _run_simple_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        result = func(*args, **kwargs)
        self.artifacts[name] = result
        self.results.append(result)  # Append to the results chain
        if name in self.dump_stages:
            self.saved_artifacts[name] = self.save_artifact(name, result)
        return result

    def save_artifact(self, name: str, data: Any) -> str:
        """Saves an intermediate artifact to a JSON file next to the input and returns its path."""

        if self.file_path == "<stdin>":
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]

        output_path = f"{base_name}.{name}.json"

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=False, cls=ArtifactEncoder)
        return output_path


def evaluate_expression(
    source_content: str,
    constants: Optional[Mapping[str, object]] = None,
    file_path: Optional[str] = None,
    dump_stages: Sequence[str] = (),
    stop_after_stage: Optional[str] = None,
):
    """High-level entry point: lex, parse and evaluate `source_content`."""
    pipeline = EvaluationPipeline(source_content, constants, file_path, dump_stages, stop_after_stage)
    return pipeline.run()
