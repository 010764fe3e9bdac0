"""Tests for the package's public surface."""

import ersynth


class TestPackage:
    """Test top-level exports and metadata."""

    def test_metadata(self):
        assert ersynth.__version__ == "1.0.0"
        assert ersynth.__author__ == "ER-Synth Contributors"

    def test_public_exports(self):
        for name in ersynth.__all__:
            assert hasattr(ersynth, name)
