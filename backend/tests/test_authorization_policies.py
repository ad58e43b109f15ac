"""
Tests for the authorization policies, run against in-memory credential stores
so no database or HTTP server is involved.
"""
import pytest
from starlette.datastructures import Headers

from uniyelp.auth.credentials import CredentialResolver, extract_api_key
from uniyelp.auth.policies import (
    guard,
    require_admin_or_owner,
    require_api_key_only,
    require_auth,
    require_owner,
    require_role,
    require_session_only,
)
from uniyelp.auth.stores import (
    ApiKeyVerification,
    ApiKeyVerifier,
    SessionInfo,
    SessionValidator,
    UserDirectory,
    UserRecord,
    session_token_from_headers,
)
from uniyelp.core.errors import Rejection
from uniyelp.schemas.auth import AuthMethod, Principal, Role

COOKIE = "uniyelp.session_token"


class FakeSessions(SessionValidator):
    def __init__(self, sessions):
        self.sessions = sessions

    def validate_session(self, headers):
        token = session_token_from_headers(headers, COOKIE)
        return self.sessions.get(token) if token else None


class FakeKeys(ApiKeyVerifier):
    def __init__(self, keys):
        self.keys = keys
        self.calls = []

    def verify_api_key(self, key):
        self.calls.append(key)
        owner = self.keys.get(key)
        if owner is None:
            return ApiKeyVerification(valid=False)
        return ApiKeyVerification(valid=True, key_id=f"key-{key}", owner_user_id=owner)


class FakeUsers(UserDirectory):
    def __init__(self, users):
        self.users = users

    def get_user(self, user_id):
        return self.users.get(user_id)


USERS = {
    "u1": UserRecord(id="u1", role="user"),
    "u2": UserRecord(id="u2", role="user"),
    "a1": UserRecord(id="a1", role="admin"),
}


@pytest.fixture
def resolver():
    sessions = FakeSessions({
        "s-u1": SessionInfo(session_id="s1", user=USERS["u1"]),
        "s-u2": SessionInfo(session_id="s2", user=USERS["u2"]),
        "s-a1": SessionInfo(session_id="s3", user=USERS["a1"]),
    })
    keys = FakeKeys({
        "k-u1": "u1",
        "k-a1": "a1",
        "k-ghost": "deleted-user",
    })
    return CredentialResolver(sessions, keys, FakeUsers(USERS), api_key_header="X-API-Key")


def session(token):
    return {"Cookie": f"{COOKIE}={token}"}


def key(value):
    return {"X-API-Key": value}


def bearer(value):
    return {"Authorization": f"Bearer {value}"}


ALL_POLICIES = [
    require_auth,
    require_api_key_only,
    require_session_only,
    require_role(Role.ADMIN),
    require_role(Role.USER),
    require_owner,
    require_admin_or_owner,
]

NO_CREDENTIALS = [
    {},
    session("unknown"),
    key("wrong"),
    bearer("wrong"),
    {"Authorization": "Basic dXNlcjpwYXNz"},
    {**session("unknown"), **key("wrong")},
    key("k-ghost"),
]


class TestUnauthenticated:
    @pytest.mark.parametrize("headers", NO_CREDENTIALS)
    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_every_policy_returns_401(self, resolver, policy, headers):
        outcome = policy(resolver, headers, {"id": "u1"})
        assert isinstance(outcome, Rejection)
        assert outcome.status_code == 401

    def test_invalid_key_is_not_treated_as_anonymous(self, resolver):
        assert resolver.resolve(key("wrong")) is None
        assert require_auth(resolver, key("wrong")).status_code == 401

    def test_key_of_deleted_user_is_unauthenticated(self, resolver):
        assert resolver.resolve_api_key(key("k-ghost")) is None


class TestCredentialResolver:
    def test_session_wins_over_api_key(self, resolver):
        principal = resolver.resolve({**session("s-u2"), **key("k-a1")})
        assert principal == Principal(id="u2", role=Role.USER, auth_method=AuthMethod.SESSION)

    def test_api_key_from_x_api_key_header(self, resolver):
        principal = resolver.resolve(key("k-u1"))
        assert principal.id == "u1"
        assert principal.auth_method == AuthMethod.API_KEY

    def test_api_key_from_bearer_header(self, resolver):
        principal = resolver.resolve(bearer("k-a1"))
        assert principal.id == "a1"
        assert principal.role == Role.ADMIN

    def test_headers_are_case_insensitive(self, resolver):
        assert resolver.resolve({"x-api-key": "k-u1"}).id == "u1"
        assert resolver.resolve(Headers(headers={"X-Api-Key": "k-u1"})).id == "u1"

    def test_extract_api_key_prefers_x_api_key(self):
        headers = {"X-API-Key": "first", "Authorization": "Bearer second"}
        assert extract_api_key(headers, "X-API-Key") == "first"

    def test_extract_api_key_ignores_empty_values(self):
        assert extract_api_key({"X-API-Key": "  ", "Authorization": "Bearer "}, "X-API-Key") is None

    @pytest.mark.parametrize("scheme", ["bearer", "BEARER", "BeArEr"])
    def test_bearer_scheme_is_case_insensitive(self, resolver, scheme):
        assert extract_api_key({"Authorization": f"{scheme} k-u1"}, "X-API-Key") == "k-u1"
        assert resolver.resolve({"Authorization": f"{scheme} k-u1"}).id == "u1"

    def test_other_schemes_are_ignored(self):
        assert extract_api_key({"Authorization": "Token k-u1"}, "X-API-Key") is None

    def test_no_key_means_verifier_not_called(self, resolver):
        resolver.resolve({})
        assert resolver.api_keys.calls == []


class TestSessionAndKeyIsolation:
    def test_api_key_only_ignores_session(self, resolver):
        outcome = require_api_key_only(resolver, session("s-a1"))
        assert outcome.status_code == 401

    def test_api_key_only_accepts_key(self, resolver):
        outcome = require_api_key_only(resolver, {**session("s-a1"), **key("k-u1")})
        assert outcome.id == "u1"
        assert outcome.auth_method == AuthMethod.API_KEY

    def test_session_only_ignores_api_key(self, resolver):
        outcome = require_session_only(resolver, key("k-a1"))
        assert outcome.status_code == 401

    def test_session_only_accepts_session(self, resolver):
        assert require_session_only(resolver, session("s-u1")).id == "u1"

    def test_require_auth_accepts_either(self, resolver):
        assert require_auth(resolver, session("s-u1")).auth_method == AuthMethod.SESSION
        assert require_auth(resolver, key("k-u1")).auth_method == AuthMethod.API_KEY


class TestRequireRole:
    def test_session_with_wrong_role_is_403(self, resolver):
        outcome = require_role("admin")(resolver, session("s-u1"))
        assert outcome.status_code == 403

    def test_api_key_with_wrong_role_is_401(self, resolver):
        outcome = require_role("admin")(resolver, key("k-u1"))
        assert outcome.status_code == 401

    def test_session_with_matching_role(self, resolver):
        outcome = require_role(Role.ADMIN)(resolver, session("s-a1"))
        assert outcome == Principal(id="a1", role=Role.ADMIN, auth_method=AuthMethod.SESSION)

    def test_api_key_with_matching_role(self, resolver):
        outcome = require_role(Role.ADMIN)(resolver, bearer("k-a1"))
        assert outcome.auth_method == AuthMethod.API_KEY

    def test_session_mismatch_does_not_fall_back_to_key(self, resolver):
        outcome = require_role(Role.ADMIN)(resolver, {**session("s-u1"), **key("k-a1")})
        assert outcome.status_code == 403

    def test_unknown_role_rejected_at_construction(self):
        with pytest.raises(ValueError):
            require_role("superuser")


class TestRequireOwner:
    def test_missing_route_param_is_400(self, resolver):
        assert require_owner(resolver, session("s-u2"), {}).status_code == 400

    def test_none_route_params_is_400(self, resolver):
        assert require_owner(resolver, session("s-u2"), None).status_code == 400

    def test_other_user_is_403(self, resolver):
        assert require_owner(resolver, session("s-u2"), {"id": "u1"}).status_code == 403

    def test_matching_id(self, resolver):
        assert require_owner(resolver, session("s-u1"), {"id": "u1"}).id == "u1"

    def test_matching_user_id_param(self, resolver):
        assert require_owner(resolver, session("s-u1"), {"userId": "u1"}).id == "u1"

    def test_id_takes_precedence_over_user_id(self, resolver):
        outcome = require_owner(resolver, session("s-u1"), {"id": "u2", "userId": "u1"})
        assert outcome.status_code == 403

    def test_api_key_is_not_enough(self, resolver):
        assert require_owner(resolver, key("k-u1"), {"id": "u1"}).status_code == 401

    def test_admin_is_not_exempt(self, resolver):
        assert require_owner(resolver, session("s-a1"), {"id": "u1"}).status_code == 403


class TestRequireAdminOrOwner:
    def test_admin_reaches_other_users_resource(self, resolver):
        outcome = require_admin_or_owner(resolver, session("s-a1"), {"id": "u1"})
        assert isinstance(outcome, Principal)
        assert outcome.id == "a1"

    def test_admin_without_route_param(self, resolver):
        assert require_admin_or_owner(resolver, session("s-a1"), {}).id == "a1"

    def test_user_on_own_resource(self, resolver):
        assert require_admin_or_owner(resolver, session("s-u1"), {"userId": "u1"}).id == "u1"

    def test_user_on_other_resource_is_403(self, resolver):
        assert require_admin_or_owner(resolver, session("s-u1"), {"id": "u2"}).status_code == 403

    def test_user_without_route_param_is_400(self, resolver):
        assert require_admin_or_owner(resolver, session("s-u1"), {}).status_code == 400

    def test_admin_api_key_is_401(self, resolver):
        assert require_admin_or_owner(resolver, key("k-a1"), {"id": "u1"}).status_code == 401


class TestGuard:
    def test_continuation_receives_principal(self, resolver):
        guarded = guard(require_auth, lambda principal: f"hello {principal.id}")
        assert guarded(resolver, session("s-u1")) == "hello u1"

    def test_rejection_skips_continuation(self, resolver):
        calls = []
        guarded = guard(require_role(Role.ADMIN), calls.append)
        outcome = guarded(resolver, session("s-u1"))
        assert outcome.status_code == 403
        assert calls == []

    def test_guards_compose(self, resolver):
        inner = guard(require_session_only, lambda principal: principal.id)
        outer = guard(require_auth, lambda principal: inner(resolver, session("s-u2")))
        assert outer(resolver, key("k-u1")) == "u2"
