import aiohttp.web
import pytest

from unicat.clients.errors import APIError, APINotFoundError
from unicat.clients.patching import patch_location
from unicat.structs.patches import UpdateCall

LOCATION_URL = '/api/2.1/unity-catalog/external-locations/abc'


async def test_owner_call(fake_api, context, settings, logger):
    fake_api.add('patch', LOCATION_URL, {'name': 'abc', 'owner': 'updatedOwner'})

    call = UpdateCall.for_owner('updatedOwner')
    result = await patch_location(name='abc', call=call,
                                  context=context, settings=settings, logger=logger)

    assert result is None
    assert len(fake_api.requests) == 1
    assert fake_api.requests[0].method == 'PATCH'
    assert fake_api.requests[0].path == LOCATION_URL
    assert fake_api.requests[0].data == {'owner': 'updatedOwner'}


async def test_forced_bundle_call(fake_api, context, settings, logger):
    fake_api.add('patch', LOCATION_URL)

    details = {'sse_encryption_details': {'algorithm': 'AWS_SSE_KMS', 'aws_kms_key_arn': 'arn'}}
    call = UpdateCall.for_bundle({'url': 's3://foo/bar', 'encryption_details': details}, force=True)
    await patch_location(name='abc', call=call, context=context, settings=settings, logger=logger)

    assert fake_api.requests[0].data == {'url': 's3://foo/bar',
                                         'encryption_details': details,
                                         'force': True}


async def test_non_json_responses_are_ignored(fake_api, context, settings, logger):
    fake_api.add('patch', LOCATION_URL, aiohttp.web.Response(text='OK'))
    call = UpdateCall.for_owner('updatedOwner')
    await patch_location(name='abc', call=call, context=context, settings=settings, logger=logger)
    assert len(fake_api.requests) == 1
    assert all(response.closed for response in context.responses)


@pytest.mark.parametrize('status, exctype', [
    (404, APINotFoundError),
    (500, APIError),
])
async def test_errors_are_escalated(fake_api, context, settings, logger, status, exctype):
    fake_api.add_error('patch', LOCATION_URL, status=status, code='X', message='boo')
    with pytest.raises(exctype):
        await patch_location(name='abc', call=UpdateCall.for_owner('x'),
                             context=context, settings=settings, logger=logger)
