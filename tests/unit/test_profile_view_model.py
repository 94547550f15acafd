"""
Unit tests for ProfileViewModel.
"""

import pytest

from iseefood.core.state import ProfileState, ProfileViewModel


class TestProfileViewModel:
    """Tests for the local comment list."""

    @pytest.fixture
    def profile(self):
        return ProfileViewModel()

    def post(self, profile, text):
        profile.set_draft(text)
        return profile.post()

    def test_starts_empty(self, profile):
        assert profile.comments == ()
        assert profile.state.draft == ""

    def test_post_prepends_and_clears(self, profile):
        assert self.post(profile, "Great demo")

        assert profile.comments == ("Great demo",)
        assert profile.state.draft == ""

    def test_newest_first(self, profile):
        self.post(profile, "a")
        self.post(profile, "b")

        assert profile.comments == ("b", "a")

    def test_duplicates_allowed(self, profile):
        self.post(profile, "same")
        self.post(profile, "same")

        assert profile.comments == ("same", "same")

    @pytest.mark.parametrize("draft", ["", "  ", "\t", " \n "])
    def test_blank_post_is_noop(self, profile, draft):
        self.post(profile, "kept")

        assert not self.post(profile, draft)

        assert profile.comments == ("kept",)
        assert profile.state.draft == draft

    def test_comment_stored_untrimmed(self, profile):
        self.post(profile, "  padded  ")

        assert profile.comments == ("  padded  ",)

    def test_post_notifies_once(self, profile):
        profile.set_draft("hello")
        seen = []
        profile.subscribe(seen.append)

        profile.post()

        assert seen == [ProfileState(draft="", comments=("hello",))]

    def test_set_draft_does_not_post(self, profile):
        profile.set_draft("typing...")

        assert profile.comments == ()
        assert profile.state.draft == "typing..."
