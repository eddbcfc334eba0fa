"""
Where: extensibility/gateway/tests/test_pipeline.py
What: End-to-end tests of the pre-user-registration pipeline with compiled scripts.
Why: Validation, authorization and normalization must hold whatever the hook does.
"""

import json
from unittest.mock import MagicMock

import pytest

from extensibility.gateway.core.compiler import compile_script
from extensibility.gateway.core.pipeline import ExtensibilityPipeline, run_pipeline
from extensibility.gateway.models import RequestEnvelope

SECRET_NAME = "auth0-extension-secret"


@pytest.mark.asyncio
async def test_success_for_noop_callback(noop_hook, make_request):
    envelope = await run_pipeline(noop_hook, make_request())

    assert envelope == {"status": "success", "data": {}}


@pytest.mark.asyncio
async def test_success_when_setting_app_metadata_and_user_metadata(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    cb(None, {'user': {'app_metadata': {'foo': 1}, 'user_metadata': {'bar': 2}}})\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope["status"] == "success"
    assert envelope["data"]["user"]["app_metadata"]["foo"] == 1
    assert envelope["data"]["user"]["user_metadata"]["bar"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, message",
    [
        ("no good", "Body received by extensibility point is not an object"),
        (
            {"user": "bad user", "context": {"connection": {}}},
            "Body.user received by extensibility point is not an object",
        ),
        (
            {"user": {}, "context": "bad context"},
            "Body.context received by extensibility point is not an object",
        ),
        (
            {"user": {}, "context": {"connection": "bad connection"}},
            "Body.context.connection received by extensibility point is not an object",
        ),
    ],
)
async def test_rejects_invalid_payload(noop_hook, make_request, body, message):
    envelope = await run_pipeline(noop_hook, make_request(body=body))

    assert envelope == {"status": "error", "data": {"message": message}}


@pytest.mark.asyncio
async def test_rejects_calls_without_authorization_secret(noop_hook, make_request):
    request = make_request(secrets={SECRET_NAME: "foo"})

    envelope = await run_pipeline(noop_hook, request)

    assert envelope == {"status": "error", "data": {"message": "Unauthorized extensibility point"}}


@pytest.mark.asyncio
async def test_rejects_calls_with_wrong_authorization_secret(noop_hook, make_request):
    request = make_request(
        secrets={SECRET_NAME: "foo"}, headers={"authorization": "Bearer bar"}
    )

    envelope = await run_pipeline(noop_hook, request)

    assert envelope == {"status": "error", "data": {"message": "Unauthorized extensibility point"}}


@pytest.mark.asyncio
async def test_accepts_calls_with_matching_authorization_secret(noop_hook, make_request):
    request = make_request(
        secrets={SECRET_NAME: "foo"}, headers={"authorization": "Bearer foo"}
    )

    envelope = await run_pipeline(noop_hook, request)

    assert envelope == {"status": "success", "data": {}}


@pytest.mark.asyncio
async def test_require_secret_rejects_unconfigured_secret(noop_hook, make_request):
    envelope = await run_pipeline(noop_hook, make_request(), require_secret=True)

    assert envelope["data"]["message"] == "Unauthorized extensibility point"


@pytest.mark.asyncio
async def test_provides_a_custom_error_object(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    cb(PreUserRegistrationError('message', 'friendly message'))\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope == {
        "status": "error",
        "data": {
            "name": "PreUserRegistrationError",
            "message": "message",
            "friendlyMessage": "friendly message",
        },
    }


@pytest.mark.asyncio
async def test_raised_custom_error_object(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    raise PreUserRegistrationError('denied')\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope == {
        "status": "error",
        "data": {"name": "PreUserRegistrationError", "message": "denied"},
    }


@pytest.mark.asyncio
async def test_internal_error_hides_error_type(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    raise KeyError('email')\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope == {"status": "error", "data": {"message": "'email'"}}


@pytest.mark.asyncio
async def test_validation_is_checked_before_authorization(noop_hook, make_request):
    request = make_request(body="no good", secrets={SECRET_NAME: "foo"})

    envelope = await run_pipeline(noop_hook, request)

    assert envelope["data"]["message"] == "Body received by extensibility point is not an object"


@pytest.mark.asyncio
async def test_hook_is_not_called_when_rejected(make_request):
    hook = MagicMock()

    await run_pipeline(hook, make_request(body=[]))
    await run_pipeline(hook, make_request(secrets={SECRET_NAME: "foo"}))

    hook.assert_not_called()


@pytest.mark.asyncio
async def test_only_first_callback_is_used(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    cb(PreUserRegistrationError('first'))\n"
        "    cb(None, {'user': {'app_metadata': {'second': True}}})\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope["status"] == "error"
    assert envelope["data"]["message"] == "first"


@pytest.mark.asyncio
async def test_identical_runs_produce_identical_envelopes(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    user.setdefault('app_metadata', {})['plan'] = 'free'\n"
        "    cb(None, {'user': {'app_metadata': user['app_metadata']}})\n"
    )
    request = make_request(body={"user": {"email": "a@b.c"}, "context": {"connection": {}}})

    first = await run_pipeline(hook, request)
    second = await run_pipeline(hook, request)

    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
    assert "app_metadata" not in request["body"]["user"]


@pytest.mark.asyncio
async def test_hook_sees_defaulted_context(make_request):
    seen = {}

    def hook(user, context, done):
        seen["user"] = user
        seen["context"] = context
        done()

    await run_pipeline(hook, make_request(body={}))

    assert seen == {"user": {}, "context": {"connection": {}}}


@pytest.mark.asyncio
async def test_malformed_request_envelope(noop_hook):
    envelope = await run_pipeline(noop_hook, {"body": {}, "headers": "not-a-mapping"})

    assert envelope == {
        "status": "error",
        "data": {"message": "Request received by extensibility point is malformed"},
    }


@pytest.mark.asyncio
async def test_unexpected_internal_failure_becomes_error_envelope(make_request, monkeypatch):
    def broken_authorize(*args, **kwargs):
        raise RuntimeError("authorizer bug")

    monkeypatch.setattr("extensibility.gateway.core.pipeline.authorize", broken_authorize)
    pipeline = ExtensibilityPipeline(lambda user, context, done: done())

    envelope = await pipeline.run(RequestEnvelope.model_validate(make_request()))

    assert envelope.model_dump() == {"status": "error", "data": {"message": "authorizer bug"}}


@pytest.mark.asyncio
async def test_null_body_is_rejected_but_missing_body_is_empty(noop_hook, make_request):
    null_body = await run_pipeline(noop_hook, make_request(body=None))
    missing_body = await run_pipeline(noop_hook, {"headers": {}})

    assert null_body == {
        "status": "error",
        "data": {"message": "Body received by extensibility point is not an object"},
    }
    assert missing_body == {"status": "success", "data": {}}


@pytest.mark.asyncio
async def test_result_with_non_string_keys_is_not_an_object(make_request):
    hook = compile_script("def handler(user, context, cb):\n    cb(None, {1: 'a'})\n")

    envelope = await run_pipeline(hook, make_request())

    assert envelope == {
        "status": "error",
        "data": {"message": "Result received from extensibility point is not an object"},
    }


@pytest.mark.asyncio
async def test_callback_with_extra_arguments_uses_first_two(make_request):
    hook = compile_script(
        "def handler(user, context, cb):\n"
        "    cb(None, {'user': {'app_metadata': {'foo': 1}}}, context)\n"
    )

    envelope = await run_pipeline(hook, make_request())

    assert envelope == {"status": "success", "data": {"user": {"app_metadata": {"foo": 1}}}}
