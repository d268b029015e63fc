from unicat.clients import api, sessions
from unicat.helpers import typedefs
from unicat.structs import configuration, references, states


async def read_location(
        *,
        name: str,
        context: sessions.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        resource: references.Resource = references.EXTERNAL_LOCATIONS,
) -> states.ResourceState:
    """
    Read the current state of a location, including its owner.

    Raises `APINotFoundError` if the location does not exist: there is nothing
    to update in that case, and the callers should know that the location is gone.
    """
    raw = await api.get(
        url=resource.get_url(name=name),
        context=context,
        settings=settings,
        logger=logger,
    )
    return states.ResourceState.from_raw(raw or {}, name=name)
