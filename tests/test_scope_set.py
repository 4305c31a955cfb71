"""
Tests for ScopeSet.
"""

from oidc_cache_engine.request import ScopeSet


class TestScopeSet:
    def test_from_string_trims_and_dedupes(self):
        scopes = ScopeSet.from_string("openid  User.Read user.read profile")

        assert scopes.as_list() == ["openid", "User.Read", "profile"]
        assert len(scopes) == 3

    def test_contains_is_case_insensitive(self):
        scopes = ScopeSet(["User.Read"])

        assert scopes.contains_scope("user.read")
        assert not scopes.contains_scope("")
        assert not scopes.contains_scope("Mail.Read")

    def test_intersects(self):
        assert ScopeSet(["a", "B"]).intersects(ScopeSet(["b", "c"]))
        assert not ScopeSet(["a"]).intersects(ScopeSet(["c"]))

    def test_print_scopes(self):
        assert ScopeSet(["openid", "profile"]).print_scopes() == "openid profile"
        assert ScopeSet.from_string(None).print_scopes() == ""
