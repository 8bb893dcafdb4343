"""Lint engine - walks the document tree and dispatches nodes to rules."""
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from ..parser.document import parse_document
from ..parser.nodes import Block, Document, Inline, NodeKind
from .models import (
    DOCUMENT_FAULT,
    RULE_FAULT,
    BatchResult,
    LintResult,
    Severity,
    Violation,
)
from .registry import RuleDefinition, RuleRegistry
from .reporter import sort_key
from .style import RuleConfiguration, Style, resolve

logger = logging.getLogger(__name__)

Node = Union[Document, Block, Inline]

MARKDOWN_EXTENSIONS = (".md", ".markdown")


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at while checking one node."""
    definition: RuleDefinition
    options: Mapping[str, Any]
    document: Document
    ancestors: tuple

    @property
    def block(self) -> Optional[Block]:
        """Nearest enclosing block (inline rules use it to locate spans)."""
        for node in reversed(self.ancestors):
            if isinstance(node, Block):
                return node
        return None

    @property
    def node(self) -> Node:
        return self.ancestors[-1]

    @property
    def parent(self) -> Optional[Node]:
        return self.ancestors[-2] if len(self.ancestors) > 1 else None

    def violation(self, line: int, message: str, column: Optional[int] = None) -> Violation:
        return Violation(
            rule=self.definition.id,
            line=line,
            message=message,
            severity=self.definition.severity,
            column=column,
        )

    def violation_at(self, inline: Inline, message: str, offset: int = 0) -> Violation:
        """Violation positioned at an inline span (plus ``offset`` characters)."""
        line, column = self.block.position(inline.start + offset)
        return self.violation(line, message, column)


def node_line(node: Node, ancestors: tuple) -> int:
    if isinstance(node, Block):
        return node.start_line
    if isinstance(node, Inline):
        for parent in reversed(ancestors):
            if isinstance(parent, Block):
                return parent.position(node.start)[0]
    return 1


class Evaluator:
    """Evaluates the enabled rules of a configuration against documents.

    Holds no per-document state, so one evaluator can be shared by worker
    threads.
    """

    def __init__(self, registry: RuleRegistry, configuration: RuleConfiguration):
        self.registry = registry
        self.configuration = configuration
        self.enabled = [d for d in registry if configuration.is_enabled(d.id)]
        self.subscriptions: dict[NodeKind, list[RuleDefinition]] = {}
        for definition in self.enabled:
            for kind in definition.kinds:
                self.subscriptions.setdefault(kind, []).append(definition)

    def evaluate(self, document: Document, path: str = "<string>") -> LintResult:
        result = LintResult(path=path, evaluated_rules=frozenset(d.id for d in self.enabled))

        # Depth-first pre-order; children pushed reversed to pop in source order
        stack: list[tuple[Node, tuple]] = [(document, ())]
        while stack:
            node, ancestors = stack.pop()
            for definition in self.subscriptions.get(node.kind, ()):
                self._run_rule(definition, node, ancestors, document, result)

            inner = ancestors + (node,)
            children = list(node.children)
            if isinstance(node, Block):
                children.extend(node.inlines)
            stack.extend((child, inner) for child in reversed(children))

        result.violations.sort(key=sort_key)
        return result

    def _run_rule(self, definition, node, ancestors, document, result) -> None:
        context = RuleContext(
            definition=definition,
            options=self.configuration.options(definition.id),
            document=document,
            ancestors=ancestors + (node,),
        )
        try:
            violations = list(definition.check(node, context))
        except Exception as e:
            line = node_line(node, ancestors)
            logger.error(f"Rule {definition.id} failed at line {line}: {e}", exc_info=True)
            result.add_violation(Violation(
                rule=RULE_FAULT,
                line=line,
                message=f"Rule {definition.id} failed: {type(e).__name__}: {e}",
                severity=Severity.ERROR,
            ))
            return

        for violation in violations:
            result.add_violation(violation)


def default_configuration(registry: RuleRegistry) -> RuleConfiguration:
    return resolve(Style(), registry)


def _evaluator(registry: Optional[RuleRegistry], configuration: Optional[RuleConfiguration]) -> Evaluator:
    if registry is None:
        from .rules import build_registry
        registry = build_registry()
    if configuration is None:
        configuration = default_configuration(registry)
    return Evaluator(registry, configuration)


def lint_content(
    content: str,
    source_path: str = "<string>",
    registry: Optional[RuleRegistry] = None,
    configuration: Optional[RuleConfiguration] = None,
    front_matter: bool = True,
    evaluator: Optional[Evaluator] = None,
) -> LintResult:
    """
    Lint markdown content.

    Args:
        content: The markdown content to lint
        source_path: Path for reporting (doesn't need to exist)
        registry: Rule registry (default: built-in rules)
        configuration: Resolved configuration (default: registry defaults)
        front_matter: Treat a leading YAML block as front matter
        evaluator: Pre-built evaluator, overrides registry/configuration

    Returns:
        LintResult with all violations, sorted
    """
    evaluator = evaluator or _evaluator(registry, configuration)
    document = parse_document(content, front_matter=front_matter)
    return evaluator.evaluate(document, source_path)


def _fault_result(path: str, error: Exception) -> LintResult:
    result = LintResult(path=path, fault=f"{type(error).__name__}: {error}")
    result.add_violation(Violation(
        rule=DOCUMENT_FAULT,
        line=1,
        message=f"Document could not be linted: {error}",
        severity=Severity.ERROR,
    ))
    return result


async def lint_file(
    path: Path,
    registry: Optional[RuleRegistry] = None,
    configuration: Optional[RuleConfiguration] = None,
    front_matter: bool = True,
    evaluator: Optional[Evaluator] = None,
) -> LintResult:
    """
    Lint a markdown file.

    The file is read completely before parsing starts. Read or parse
    failures are returned as a result with a ``document-fault`` violation
    instead of raising.
    """
    evaluator = evaluator or _evaluator(registry, configuration)
    try:
        content = await asyncio.to_thread(path.read_text, encoding='utf-8')
        return await asyncio.to_thread(
            lint_content, content, str(path), front_matter=front_matter, evaluator=evaluator
        )
    except Exception as e:
        logger.error(f"Failed to lint {path}: {e}", exc_info=True)
        return _fault_result(str(path), e)


def expand_paths(paths: Iterable[Union[str, Path]], extensions=MARKDOWN_EXTENSIONS) -> list[Path]:
    """Expand directories into the markdown files below them, sorted."""
    expanded: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            expanded.extend(sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in extensions
            ))
        else:
            expanded.append(path)
    return expanded


async def lint_paths(
    paths: Iterable[Union[str, Path]],
    registry: Optional[RuleRegistry] = None,
    configuration: Optional[RuleConfiguration] = None,
    workers: int = 4,
    front_matter: bool = True,
    stop=None,
) -> BatchResult:
    """
    Lint many documents concurrently.

    Args:
        paths: Files and/or directories
        workers: Number of concurrent worker tasks
        stop: Optional event (asyncio or threading); once set, workers finish
            the document in hand and take no more. Unstarted paths are
            reported in ``BatchResult.dropped``.

    Returns:
        BatchResult with results in input order
    """
    evaluator = _evaluator(registry, configuration)
    files = expand_paths(paths)
    results: list[Optional[LintResult]] = [None] * len(files)

    queue: asyncio.Queue = asyncio.Queue()
    for index, path in enumerate(files):
        queue.put_nowait((index, path))

    async def worker() -> None:
        while not (stop is not None and stop.is_set()):
            try:
                index, path = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[index] = await lint_file(path, front_matter=front_matter, evaluator=evaluator)

    await asyncio.gather(*(worker() for _ in range(max(1, min(workers, len(files))))))

    batch = BatchResult(results=[r for r in results if r is not None])
    batch.dropped = [str(path) for path, r in zip(files, results) if r is None]
    if batch.dropped:
        logger.info(f"Cancelled: {len(batch.dropped)} queued documents dropped")
    return batch


def get_available_rules(registry: RuleRegistry) -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule id to its one-line description
    """
    return {definition.id: definition.description for definition in registry}
