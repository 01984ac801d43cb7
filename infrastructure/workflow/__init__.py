# infrastructure/workflow/__init__.py
from infrastructure.workflow.base_loader import WorkflowLoaderBase
from infrastructure.workflow.document import (
    dump_request,
    dump_workflow,
    request_from_data,
    workflow_from_data,
    workflow_json_schema,
)
from infrastructure.workflow.json_loader import JsonWorkflowLoader
from infrastructure.workflow.loader_registry import WorkflowLoaderRegistry
from infrastructure.workflow.variable_file_loader import VariableFileLoader
from infrastructure.workflow.yaml_loader import YamlWorkflowLoader

__all__ = [
    "WorkflowLoaderBase",
    "WorkflowLoaderRegistry",
    "YamlWorkflowLoader",
    "JsonWorkflowLoader",
    "VariableFileLoader",
    "dump_request",
    "dump_workflow",
    "request_from_data",
    "workflow_from_data",
    "workflow_json_schema",
]
