"""Next.js module scaffolder.

Runs ``create-next-app`` in a private temporary directory, merges a
module's npm dependencies into the generated ``package.json``, and returns
the generated project as an in-memory FileMap (``{path: {type, content}}``)
with the module's configured removals applied.

Quick usage::

    from nextjs_scaffold import scaffold

    files = await scaffold(
        {"dependencies": {"npm": {"dependencies": {"lucide-react": "^0.460.0"}}}},
        {"project": {"name": "shop"}, "module": {"fieldValues": {"routerType": "app"}}},
    )
"""

from .collector import BINARY_EXTENSIONS, collect_tree, is_binary_path
from .config import ScaffoldSettings
from .errors import (
    EmptyOutputError,
    GenerationError,
    ProcessError,
    ProcessExitError,
    ProcessSpawnError,
    ProcessTimeoutError,
    ScaffoldError,
)
from .events import (
    ConsoleReporter,
    EventLevel,
    NullReporter,
    RecordingReporter,
    Reporter,
    ScaffoldEvent,
)
from .generator import CreateNextAppGenerator
from .manifest import merge_dependencies, merge_manifest
from .models import (
    FileEntry,
    FileKind,
    FileMap,
    ModuleConfig,
    ScaffoldContext,
    file_map_from_json,
    file_map_to_json,
)
from .removal import apply_removals
from .runner import ProcessResult, ProcessRunner
from .scaffolder import NextjsScaffolder, scaffold, scaffold_sync
from .workspace import ScaffoldWorkspace

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "NextjsScaffolder",
    "scaffold",
    "scaffold_sync",
    "ScaffoldSettings",
    # Components
    "ProcessRunner",
    "ProcessResult",
    "CreateNextAppGenerator",
    "collect_tree",
    "is_binary_path",
    "BINARY_EXTENSIONS",
    "merge_dependencies",
    "merge_manifest",
    "apply_removals",
    "ScaffoldWorkspace",
    # Data model
    "FileEntry",
    "FileKind",
    "FileMap",
    "ModuleConfig",
    "ScaffoldContext",
    "file_map_to_json",
    "file_map_from_json",
    # Events
    "ScaffoldEvent",
    "EventLevel",
    "Reporter",
    "ConsoleReporter",
    "RecordingReporter",
    "NullReporter",
    # Errors
    "ScaffoldError",
    "ProcessError",
    "ProcessSpawnError",
    "ProcessExitError",
    "ProcessTimeoutError",
    "GenerationError",
    "EmptyOutputError",
]
