from unicat.clients import api, sessions
from unicat.helpers import typedefs
from unicat.structs import configuration, patches, references


async def patch_location(
        *,
        name: str,
        call: patches.UpdateCall,
        context: sessions.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        resource: references.Resource = references.EXTERNAL_LOCATIONS,
) -> None:
    """
    Apply one partial update to a location.

    The response body is not read at all: it can be partial, empty, or not even
    JSON, depending on the server's version and the gateways in between.
    Only the status matters. The actual state must be re-read when needed --
    specifically, after the whole update transaction is over.

    All errors are escalated as is, including HTTP 404 for the absent location:
    for a transaction, a disappeared location is a failure as any other.
    """
    response = await api.request(
        method='patch',
        url=resource.get_url(name=name),
        payload=call.as_payload(),
        context=context,
        settings=settings,
        logger=logger,
    )
    async with response:
        pass  # released unread.
