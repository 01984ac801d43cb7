#!/usr/bin/env python3
"""
HTTP workflow runner

Usage:
  python -m scripts.httpflow_cli workflow <path> [-v name=value ...] [-f vars.yaml ...] [-e]
  python -m scripts.httpflow_cli request <path> [-v name=value ...] [-e]
  python -m scripts.httpflow_cli schema

Examples:
  python -m scripts.httpflow_cli workflow workflows/login.yaml -v user=alice -v password=secret
  python -m scripts.httpflow_cli --log-level DEBUG --log-file workflow workflows/login.yaml -e
"""
from __future__ import annotations

import argparse
import json
import sys
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from application.executor.workflow_executor import WorkflowExecutor
from application.handlers.request_handler import RequestExecutor
from application.ports.logger import LoggerPort
from application.ports.observer import CompositeObserver, WorkflowObserver
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from application.services.execution_error_builder import ExecutionErrorBuilder
from application.services.request_builder import RequestBuilder
from application.services.template_renderer import TemplateRenderer
from domain.exceptions import WorkflowError
from domain.run import WorkflowResult
from domain.variables import VariableStore
from infrastructure.display.console_printer import ConsolePrinter
from infrastructure.display.trace_logger import TraceLoggingObserver
from infrastructure.http.http_artifact_saver import HttpArtifactSaver
from infrastructure.logging.log_setup import add_file_logging, setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.url.base_url_resolver import BaseUrlResolver
from infrastructure.variables.env_variable_provider import EnvVariableProvider
from infrastructure.workflow.document import workflow_json_schema
from infrastructure.workflow.loader_registry import WorkflowLoaderRegistry
from infrastructure.workflow.variable_file_loader import VariableFileLoader

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]
LOG_FILE = ".httpflow.log"
DEFAULT_TIMEOUT_SEC = 30.0


def parse_variables(specs: Optional[List[str]], logger: LoggerPort) -> Dict[str, Optional[str]]:
    """name=value を辞書にする。最初の '=' で分割し、不正な指定はログに残して無視する"""
    out: Dict[str, Optional[str]] = {}
    for spec in specs or []:
        name, sep, value = spec.partition("=")
        if not sep or not name:
            logger.warning("cli.invalid_variable", spec=spec)
            continue
        out[name] = value
    return out


def init_variables(specs: Optional[List[str]], include_env: bool, logger: LoggerPort) -> Dict[str, Optional[str]]:
    variables: Dict[str, Optional[str]] = {}
    if include_env:
        variables.update(EnvVariableProvider().get())
    # 明示的な -v は環境変数より優先
    variables.update(parse_variables(specs, logger))
    return variables


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", type=str)
    parser.add_argument("-v", "--variables", action="append", metavar="NAME=VALUE")
    parser.add_argument("-e", "--env", action="store_true", help="Include environment variables (and .env)")
    parser.add_argument("--base-url", type=str, default="")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_SEC)
    parser.add_argument("--strict", action="store_true", help="Fail on unresolved variable references")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="httpflow", description="Declarative HTTP workflow runner")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING")
    parser.add_argument("--log-file", action="store_true", help=f"Also log into {LOG_FILE}")
    subparsers = parser.add_subparsers(dest="command")

    workflow_parser = subparsers.add_parser("workflow", help="Execute a workflow")
    _add_run_options(workflow_parser)
    workflow_parser.add_argument("-f", "--files", action="append", metavar="VARFILE", help="Additional variable files")
    workflow_parser.add_argument("--save-artifacts", type=str, metavar="DIR")

    request_parser = subparsers.add_parser("request", help="Execute a single request")
    _add_run_options(request_parser)

    subparsers.add_parser("schema", help="Print the JSON schema of the workflow document")
    return parser


def _request_executor(args: argparse.Namespace) -> RequestExecutor:
    http_client = RequestsSessionHttpClient(timeout_sec=args.timeout)
    builder = RequestBuilder(TemplateRenderer(strict=args.strict))
    return RequestExecutor(http_client, builder=builder)


def _print_error(result: WorkflowResult) -> None:
    detail = ExecutionErrorBuilder().build_from_result(result)
    if detail is None:
        return
    print(f"ERROR [{detail.code}] request={detail.request_name or '-'}: {detail.message}", file=sys.stderr)


def _run_workflow(args: argparse.Namespace, logger: LoggerPort) -> int:
    loader = WorkflowLoaderRegistry().get_loader(args.path)
    workflow = loader.load_from_file(args.path)
    if args.files:
        # -f はカレントディレクトリ基準
        extra = [str(Path(f).resolve()) for f in args.files]
        workflow = replace(workflow, variable_files=[*workflow.variable_files, *extra])

    run_id = uuid.uuid4().hex
    printer = ConsolePrinter()
    observers: List[WorkflowObserver] = [printer, TraceLoggingObserver(logger.bind(run_id=run_id))]
    if args.save_artifacts:
        observers.append(HttpArtifactSaver(args.save_artifacts, run_id=run_id))

    deps = ExecutionDeps(
        logger=logger,
        observer=CompositeObserver(observers),
        url_resolver=BaseUrlResolver(args.base_url),
        variable_file_loader=VariableFileLoader(),
    )
    variables = init_variables(args.variables, args.env, logger)

    printer.print_workflow_header(workflow.name)
    result = WorkflowExecutor(_request_executor(args)).execute(workflow, deps, variables, run_id=run_id)
    if not result.ok:
        _print_error(result)
        return 1
    return 0


def _run_request(args: argparse.Namespace, logger: LoggerPort) -> int:
    template = WorkflowLoaderRegistry().get_loader(args.path).load_request_from_file(args.path)
    deps = ExecutionDeps(
        logger=logger,
        observer=CompositeObserver([ConsolePrinter(), TraceLoggingObserver(logger)]),
        url_resolver=BaseUrlResolver(args.base_url),
    )
    store = VariableStore.of(init_variables(args.variables, args.env, logger))
    _request_executor(args).execute(template, store, deps)
    return 0


def _print_schema() -> int:
    print(json.dumps(workflow_json_schema(), indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_console_logging(args.log_level)
    if args.log_file:
        add_file_logging(LOG_FILE, args.log_level)
    logger = LoguruLogger()

    try:
        if args.command == "workflow":
            return _run_workflow(args, logger)
        if args.command == "request":
            return _run_request(args, logger)
        if args.command == "schema":
            return _print_schema()
        raise ValueError(f"Unknown command: {args.command}")
    except WorkflowError as exc:
        logger.error("cli.failed", command=args.command, code=exc.code, error=str(exc))
        print(f"ERROR [{exc.code}] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
