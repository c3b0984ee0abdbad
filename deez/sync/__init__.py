# DEEZ Sync Module
# Root resolution, walking, classification, actions, hooks and the command pipeline

from deez.sync.actions import Action, ActionType, Executor, Plan, Planner
from deez.sync.commands import ALIASES, HOOK_NAMES, Command
from deez.sync.engine import CommandResult, SyncEngine
from deez.sync.hooks import Hook, HookContext, HookRunner, run_in_root
from deez.sync.root import ConfigRoot, RootResolver, is_config_root, is_remote_locator
from deez.sync.status import EntryStatus, StateClassifier, StatusReport, SyncStatus, classify
from deez.sync.walk import MARKER_FILE, EntryKind, IgnoreFilter, RelativeEntry, Walker

__all__ = [
    # Commands
    "Command",
    "ALIASES",
    "HOOK_NAMES",
    # Walk
    "MARKER_FILE",
    "EntryKind",
    "RelativeEntry",
    "IgnoreFilter",
    "Walker",
    # Root
    "ConfigRoot",
    "RootResolver",
    "is_config_root",
    "is_remote_locator",
    # Status
    "SyncStatus",
    "EntryStatus",
    "StatusReport",
    "StateClassifier",
    "classify",
    # Actions
    "ActionType",
    "Action",
    "Plan",
    "Planner",
    "Executor",
    # Hooks
    "Hook",
    "HookContext",
    "HookRunner",
    "run_in_root",
    # Engine
    "SyncEngine",
    "CommandResult",
]
