"""Unit tests for InstanceReader: active server projection, absence vs corruption."""

import os

import pytest

from instance_api.core.errors import INTERNAL, NOT_FOUND, InternalError, NotFound
from instance_api.status_server.reader import InstanceReader


class TestActiveServer:
    def test_strips_transient_keys_and_keeps_the_rest(self, instances_dir, write_instance):
        write_instance(
            "123",
            {
                "activeServer": "A",
                "serverList": {"A": {"foo": 1, "timeTillDay": 5, "timeTillNight": 10, "nested": {"x": [1, 2]}}},
            },
        )
        out = InstanceReader(instances_dir).get_active_server("123")
        assert out == {"activeServer": "A", "server": {"foo": 1, "nested": {"x": [1, 2]}}}

    def test_does_not_touch_stored_file(self, instances_dir, write_instance):
        path = write_instance("123", {"activeServer": "A", "serverList": {"A": {"timeTillDay": 5}}})
        before = path.read_text(encoding="utf-8")
        out = InstanceReader(instances_dir).get_active_server("123")
        assert out["server"] == {}
        assert path.read_text(encoding="utf-8") == before
        assert "timeTillDay" in InstanceReader(instances_dir).load_instance("123")["serverList"]["A"]

    def test_other_servers_are_not_returned(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "B", "serverList": {"A": {"name": "a"}, "B": {"name": "b"}}})
        out = InstanceReader(instances_dir).get_active_server("1")
        assert out == {"activeServer": "B", "server": {"name": "b"}}

    def test_accepts_string_path(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A", "serverList": {"A": {}}})
        assert InstanceReader(str(instances_dir)).get_active_server("1")["activeServer"] == "A"


class TestNotFound:
    def test_missing_record(self, instances_dir):
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("nope")
        assert ei.value.what == "guild"
        assert ei.value.kind == NOT_FOUND

    def test_missing_directory_is_not_found(self, tmp_path):
        with pytest.raises(NotFound) as ei:
            InstanceReader(tmp_path / "does-not-exist").get_active_server("1")
        assert ei.value.what == "guild"

    @pytest.mark.parametrize("guild_id", ["", ".", "..", "a/b", "..\\x", "12\x0034"])
    def test_ids_that_cannot_name_a_record(self, instances_dir, guild_id):
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).load_instance(guild_id)
        assert ei.value.what == "guild"

    def test_no_normalization(self, instances_dir, write_instance):
        write_instance("Guild1", {"activeServer": "A", "serverList": {"A": {}}})
        with pytest.raises(NotFound):
            InstanceReader(instances_dir).get_active_server("guild1")
        with pytest.raises(NotFound):
            InstanceReader(instances_dir).get_active_server(" Guild1")

    def test_active_server_not_in_list(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A", "serverList": {"B": {}, "C": {}}})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.what == "activeServer"
        assert ei.value.context == {"activeServer": "A", "availableServers": ["B", "C"]}

    def test_active_server_unset(self, instances_dir, write_instance):
        write_instance("1", {"serverList": {"B": {}}})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.context == {"activeServer": None, "availableServers": ["B"]}

    def test_server_list_absent(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A"})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.context == {"activeServer": "A", "availableServers": []}

    def test_null_entry_counts_as_missing(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A", "serverList": {"A": None}})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.context["availableServers"] == ["A"]

    def test_non_string_active_server(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": ["A"], "serverList": {"A": {}}})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.context["activeServer"] == ["A"]

    def test_integer_active_server_matches_string_key(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": 7, "serverList": {"7": {"name": "seven", "timeTillDay": 3}}})
        out = InstanceReader(instances_dir).get_active_server("1")
        assert out == {"activeServer": 7, "server": {"name": "seven"}}

    @pytest.mark.parametrize("active_server", [True, 0, 7.5])
    def test_other_scalar_active_server(self, instances_dir, write_instance, active_server):
        write_instance("1", {"activeServer": active_server, "serverList": {"true": {}, "0": {}, "7.5": {}}})
        with pytest.raises(NotFound) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.context["activeServer"] == active_server


class TestMalformed:
    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "",
            "[1, 2, 3]",
            "\"text\"",
            "null",
            '{"activeServer":"A","serverList":{"A":{"x":NaN}}}',
            '{"activeServer":"A","serverList":{"A":{"x":Infinity}}}',
            '{"activeServer":"A","serverList":{"A":{"x":-Infinity}}}',
        ],
    )
    def test_corrupt_record_is_internal_not_not_found(self, instances_dir, write_instance, raw):
        write_instance("1", raw)
        with pytest.raises(InternalError) as ei:
            InstanceReader(instances_dir).get_active_server("1")
        assert ei.value.kind == INTERNAL

    def test_server_list_not_object(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A", "serverList": ["A"]})
        with pytest.raises(InternalError):
            InstanceReader(instances_dir).get_active_server("1")

    def test_entry_not_object(self, instances_dir, write_instance):
        write_instance("1", {"activeServer": "A", "serverList": {"A": "oops"}})
        with pytest.raises(InternalError):
            InstanceReader(instances_dir).get_active_server("1")

    def test_invalid_utf8(self, instances_dir):
        (instances_dir / "1.json").write_bytes(b"\xff\xfe{}")
        with pytest.raises(InternalError):
            InstanceReader(instances_dir).load_instance("1")

    @pytest.mark.skipif(os.name == "nt" or getattr(os, "geteuid", lambda: 1)() == 0, reason="needs POSIX non-root permissions")
    def test_unreadable_file(self, instances_dir, write_instance):
        path = write_instance("1", {"activeServer": "A", "serverList": {"A": {}}})
        path.chmod(0)
        try:
            with pytest.raises(InternalError):
                InstanceReader(instances_dir).load_instance("1")
        finally:
            path.chmod(0o644)

    def test_directory_in_place_of_file(self, instances_dir):
        (instances_dir / "1.json").mkdir()
        with pytest.raises(InternalError):
            InstanceReader(instances_dir).load_instance("1")
