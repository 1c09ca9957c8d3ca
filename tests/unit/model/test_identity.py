"""Tests for NSVC and NSVCA identity strings."""

import pytest

from modulemd.model import ModuleStreamV2, identity_key, new_module_stream, nsvc, nsvca


@pytest.fixture(params=[1, 2])
def mdversion(request) -> int:
    """Run a test once per stream schema version."""
    return request.param


class TestNSVCA:
    """Tests for the NSVCA encoding."""

    def test_all_fields(self):
        """Every field present renders in full."""
        stream = ModuleStreamV2("m", "s", version=42, context="c", arch="x86_64")
        assert nsvca(stream) == "m:s:42:c:x86_64"

    def test_missing_context_leaves_placeholder(self):
        """An absent middle field renders as an empty string."""
        stream = ModuleStreamV2("m", "s", version=42, arch="x86_64")
        assert nsvca(stream) == "m:s:42::x86_64"

    def test_arch_only(self):
        """A lone arch forces placeholders for every earlier field."""
        stream = ModuleStreamV2("m", arch="x86_64")
        assert nsvca(stream) == "m::::x86_64"

    def test_module_only(self):
        """Without any optional field only the module name remains."""
        assert nsvca(ModuleStreamV2("m")) == "m"

    def test_version_without_stream(self):
        """A version with no stream keeps the empty stream slot."""
        stream = ModuleStreamV2("m", version=2019, arch="x86_64")
        assert nsvca(stream) == "m::2019::x86_64"
        stream.context = "feedfeed"
        assert nsvca(stream) == "m::2019:feedfeed:x86_64"

    def test_truncates_after_last_present_field(self):
        """Trailing absent fields are dropped."""
        assert nsvca(ModuleStreamV2("m", "s")) == "m:s"
        assert nsvca(ModuleStreamV2("m", "s", version=42)) == "m:s:42"

    def test_no_module_name(self, mdversion):
        """No module name means no identity."""
        stream = new_module_stream(mdversion)
        assert stream.get_NSVCA_as_string() is None


class TestNSVC:
    """Tests for the legacy NSVC encoding."""

    def test_version_always_rendered(self, mdversion):
        """An unset version renders as 0."""
        stream = new_module_stream(mdversion, "modulename", "streamname")
        assert stream.get_nsvc_as_string() == "modulename:streamname:0"

    def test_version_and_context(self, mdversion):
        """Context is appended only when present."""
        stream = new_module_stream(mdversion, "modulename", "streamname")
        stream.version = 42
        assert stream.get_nsvc_as_string() == "modulename:streamname:42"
        stream.context = "deadbeef"
        assert stream.get_nsvc_as_string() == "modulename:streamname:42:deadbeef"

    def test_arch_ignored(self):
        """NSVC has no arch component."""
        stream = ModuleStreamV2("m", "s", version=42, context="c", arch="x86_64")
        assert nsvc(stream) == "m:s:42:c"

    def test_no_stream_name(self, mdversion):
        """No stream name means no identity."""
        assert new_module_stream(mdversion, "modulename").get_nsvc_as_string() is None
        assert new_module_stream(mdversion).get_nsvc_as_string() is None


class TestIdentityKey:
    """Tests for the stream sort key."""

    def test_orders_by_identity_fields(self):
        """Streams sort by module, stream, version, context, arch."""
        streams = [
            ModuleStreamV2("b", "1", version=1),
            ModuleStreamV2("a", "2", version=1),
            ModuleStreamV2("a", "1", version=5, context="z"),
            ModuleStreamV2("a", "1", version=5, context="y"),
            ModuleStreamV2("a", "1", version=3),
        ]
        ordered = [nsvca(s) for s in sorted(streams, key=identity_key)]
        assert ordered == ["a:1:3", "a:1:5:y", "a:1:5:z", "a:2:1", "b:1:1"]
