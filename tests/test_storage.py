from Pianoacademy.data import storage


def test_set_get_roundtrip_json(db):
    assert storage.set("k", {"a": [1, 2], "name": "김지우"})
    assert storage.get("k") == {"a": [1, 2], "name": "김지우"}


def test_get_missing_returns_default(db):
    assert storage.get("missing") is None
    assert storage.get("missing", "x") == "x"


def test_remove(db):
    storage.set("k", 1)
    assert storage.remove("k")
    assert storage.get("k") is None


def test_auth_token_and_user_data(db):
    storage.set_auth_token("tok")
    storage.set_user_data({"uid": "u1"})
    assert storage.get_auth_token() == "tok"
    assert storage.get_user_data() == {"uid": "u1"}
    storage.remove_auth_token()
    storage.remove_user_data()
    assert storage.get_auth_token() is None
    assert storage.get_user_data() is None


def test_bool_helpers(db):
    storage.set_bool("flag", True)
    assert storage.get_bool("flag") is True
    assert storage.get_bool("other", default=True) is True


def test_cache_validity_uses_ttl(db):
    storage.set_cached_data("students", [1, 2], ttl=60, now=1000)
    assert storage.get_cached_data("students")["data"] == [1, 2]
    assert storage.is_cache_valid("students", now=1059)
    assert not storage.is_cache_valid("students", now=1060)
    assert not storage.is_cache_valid("nothing", now=1000)


def test_clear_cache_keeps_session(db):
    storage.set_auth_token("tok")
    storage.set_cached_data("a", 1)
    storage.clear_cache()
    assert storage.get_cached_data("a") is None
    assert storage.get_auth_token() == "tok"


def test_clear_all_data(db):
    storage.set_auth_token("tok")
    storage.set_selected_child("1")
    storage.set("unrelated", 5)
    storage.clear_all_data()
    assert storage.get_auth_token() is None
    assert storage.get_selected_child() is None
    assert storage.get("unrelated") == 5


def test_unserializable_value_is_reported_not_raised(db):
    assert storage.set("bad", {1, 2}) is False
