"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from unicat.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIServerError,
)
from unicat.clients.sessions import (
    APIContext,
)
from unicat.engines.loggers import (
    LogFormat,
    LocationLogger,
    configure,
)
from unicat.helpers.typedefs import (
    Logger,
)
from unicat.helpers.versions import (
    version as __version__,
)
from unicat.reactor.planning import (
    plan,
)
from unicat.reactor.transactions import (
    PartialUpdater,
    StateReader,
    execute,
)
from unicat.reactor.updating import (
    UpdateResult,
    update,
    reconcile,
    update_location,
    plan_location,
)
from unicat.structs.configuration import (
    Settings,
    NetworkingSettings,
)
from unicat.structs.outcomes import (
    Outcome,
    OutcomeKind,
    UpdateError,
    OwnerRollbackError,
)
from unicat.structs.patches import (
    CallGroup,
    UpdateCall,
)
from unicat.structs.references import (
    Resource,
    EXTERNAL_LOCATIONS,
)
from unicat.structs.states import (
    ResourceState,
    load_desired,
    dump_state,
)

__all__ = [
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'APIServerError',
    'APIContext',
    'LogFormat',
    'LocationLogger',
    'configure',
    'Logger',
    'plan',
    'PartialUpdater',
    'StateReader',
    'execute',
    'UpdateResult',
    'update',
    'reconcile',
    'update_location',
    'plan_location',
    'Settings',
    'NetworkingSettings',
    'Outcome',
    'OutcomeKind',
    'UpdateError',
    'OwnerRollbackError',
    'CallGroup',
    'UpdateCall',
    'Resource',
    'EXTERNAL_LOCATIONS',
    'ResourceState',
    'load_desired',
    'dump_state',
]
