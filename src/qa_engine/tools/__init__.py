# qa_engine/tools/__init__.py

from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.data_tracker import EntityKind, TestDataTracker
from qa_engine.tools.test_executor import TestExecutorTool
from qa_engine.tools.test_reporter import TestReporterTool
from qa_engine.tools.dependency_verifier import (
    BuildManifestResolver,
    DependencyVerifierTool,
    FilesystemResolver,
    ModuleResolver,
    StaticResolver,
)
from qa_engine.tools.categorizer import CrossSystemPolicy, categorize, categorize_all
from qa_engine.tools.cleanup import cleanup_tracked_data

__all__ = [
    "ApiProbeTool",
    "EntityKind",
    "TestDataTracker",
    "TestExecutorTool",
    "TestReporterTool",
    "BuildManifestResolver",
    "DependencyVerifierTool",
    "FilesystemResolver",
    "ModuleResolver",
    "StaticResolver",
    "CrossSystemPolicy",
    "categorize",
    "categorize_all",
    "cleanup_tracked_data",
]
