"""KNOT core library: notes storage, filtering, stats and the interaction state machine.

Public API re-exports for convenient imports:
    from knot import ModeController, NoteStore, load_config, ...
"""

# Configuration
from knot.config import (
    Config,
    load_config,
    notes_root,
    config_path,
    DEFAULT_PALETTE,
)

# Errors
from knot.errors import (
    KnotError,
    StorageError,
    NotFound,
    PermissionDenied,
    NameConflict,
    InvalidName,
    EditorError,
    LaunchFailed,
    EditorAbnormalExit,
)

# Models
from knot.models import (
    Focus,
    Category,
    Note,
    NoteStats,
    FilterState,
    DeleteTarget,
    Mode,
    Normal,
    ZenActive,
    Filtering,
    CreatingNote,
    CreatingCategory,
    ConfirmingDelete,
)

# Engines
from knot.fuzzy import fuzzy_filter, fuzzy_match
from knot.stats import compute_stats, NoteCache

# Storage, navigation, editor, controller
from knot.storage import NoteStore, validate_name
from knot.navigation import NavigationModel
from knot.editor import EditorHandoff, launch_editor
from knot.controller import ModeController

# Render projection
from knot.view import Frame, Pane, Row, project
