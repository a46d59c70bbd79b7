"""Unit tests for dotree.navigation."""

import pytest

from dotree.errors import IncompleteSelectionError
from dotree.navigation import Cancelled, KeyStream, Navigator, Resolved, View, navigate
from dotree.parser import parse

CONFIG = """
menu {
    g "Git" {
        s "Status" => git status
        co "Checkout" => git checkout
        cm "Commit" => git commit
        r "Remote" {
            p "Push" => git push
        }
    }
    s "Status" => systemctl status
    sh "Shell" => bash
    q "Quit" => "exit 0"
}
"""

BACKSPACE = "\x7f"
ESCAPE = "\x1b"
ENTER = "\r"


class _RecordingRenderer:
    def __init__(self) -> None:
        self.views: list[View] = []

    def render(self, view: View) -> None:
        self.views.append(view)


@pytest.fixture
def root():
    return parse(CONFIG).menu


def _feed_all(navigator: Navigator, keys: str):
    outcome = None
    for key in keys:
        outcome = navigator.feed(key)
        if outcome is not None:
            break
    return outcome


class TestResolution:
    def test_unique_trigger_resolves_immediately(self, root):
        outcome = Navigator(root).feed("q")

        assert outcome == Resolved(template="exit 0", path=("q",))

    def test_submenu_descends_and_resets_buffer(self, root):
        navigator = Navigator(root)

        assert navigator.feed("g") is None
        assert navigator.current is root.entries[0].child
        assert navigator.buffer == ""
        assert navigator.breadcrumb == ("Git",)

    def test_nested_path(self, root):
        outcome = _feed_all(Navigator(root), "grp")

        assert outcome == Resolved(template="git push", path=("g", "r", "p"))

    def test_shared_prefix_does_not_resolve(self, root):
        navigator = Navigator(root)

        assert navigator.feed("s") is None
        assert [e.trigger for e in navigator.view().entries] == ["s", "sh"]
        assert navigator.buffer == "s"

    def test_longer_trigger_disambiguates(self, root):
        outcome = _feed_all(Navigator(root), "sh")

        assert outcome.template == "bash"

    def test_multi_character_triggers_need_every_character(self, root):
        navigator = Navigator(root)
        navigator.feed("g")

        assert navigator.feed("c") is None
        assert [e.trigger for e in navigator.view().entries] == ["co", "cm"]
        assert navigator.feed("m") == Resolved(template="git commit", path=("g", "cm"))

    def test_enter_selects_exact_trigger_that_others_extend(self, root):
        navigator = Navigator(root)
        navigator.feed("s")

        assert navigator.feed(ENTER) == Resolved(template="systemctl status", path=("s",))

    def test_enter_without_exact_match_is_rejected(self, root):
        navigator = Navigator(root)
        navigator.feed("g")
        navigator.feed("c")

        assert navigator.feed(ENTER) is None
        assert navigator.rejected
        assert navigator.buffer == "c"


class TestInvalidKeys:
    def test_unmatched_key_is_rejected_and_buffer_kept(self, root):
        navigator = Navigator(root)
        navigator.feed("s")

        assert navigator.feed("x") is None
        assert navigator.buffer == "s"
        assert navigator.view().rejected

    def test_rejection_clears_on_next_key(self, root):
        navigator = Navigator(root)
        navigator.feed("x")
        navigator.feed("s")

        assert not navigator.view().rejected

    def test_triggers_are_case_sensitive(self, root):
        navigator = Navigator(root)

        assert navigator.feed("Q") is None
        assert navigator.rejected


class TestErase:
    def test_erase_drops_last_character(self, root):
        navigator = Navigator(root)
        navigator.feed("s")
        navigator.feed(BACKSPACE)

        assert navigator.state() == (root, "")

    def test_erase_on_empty_buffer_ascends(self, root):
        navigator = Navigator(root)
        navigator.feed("g")
        navigator.feed(BACKSPACE)

        assert navigator.state() == (root, "")
        assert navigator.breadcrumb == ()

    def test_erase_at_root_is_a_no_op(self, root):
        navigator = Navigator(root)
        navigator.feed(BACKSPACE)

        assert navigator.state() == (root, "")

    @pytest.mark.parametrize("prefix", ["", "s", "g", "gc", "gr"])
    def test_append_then_erase_restores_state(self, root, prefix):
        navigator = Navigator(root)
        _feed_all(navigator, prefix)
        before = navigator.state()

        for key in "scrgqpmho":
            probe = Navigator(root)
            _feed_all(probe, prefix)
            if probe.current.matching(probe.buffer + key) and probe.feed(key) is None:
                probe.feed(BACKSPACE)
                assert probe.state() == before

    def test_ascending_restores_buffer_before_descent(self):
        docker = parse(
            'menu {\n  d "Docker" { p => "docker ps" }\n  dc "Compose" => docker compose up\n}'
        ).menu
        navigator = Navigator(docker)
        navigator.feed("d")
        navigator.feed(ENTER)

        assert navigator.breadcrumb == ("Docker",)
        navigator.feed(BACKSPACE)
        assert navigator.state() == (docker, "d")


class TestCancel:
    @pytest.mark.parametrize("key", [ESCAPE, "\x03", "\x04"])
    def test_cancel_keys(self, root, key):
        navigator = Navigator(root)
        navigator.feed("s")

        assert navigator.feed(key) == Cancelled(buffer="s")


class TestView:
    def test_visible_entries_equal_matches(self, root):
        navigator = Navigator(root)
        for key in "gc":
            navigator.feed(key)
            view = navigator.view()
            assert list(view.entries) == navigator.current.matching(navigator.buffer)

    def test_empty_buffer_shows_every_entry(self, root):
        assert Navigator(root).view().entries == root.entries


class TestKeyStream:
    def test_preset_characters_in_order(self):
        assert list(KeyStream(["gr", "p"])) == ["g", "r", "p"]

    def test_falls_through_to_live_reads(self):
        live = iter(["x", "y", None])

        assert list(KeyStream(["a"], lambda: next(live))) == ["a", "x", "y"]

    def test_interactive_flag(self):
        assert not KeyStream([]).interactive
        assert KeyStream([], lambda: None).interactive


class TestNavigate:
    def test_renders_every_state(self, root):
        renderer = _RecordingRenderer()

        outcome = navigate(root, KeyStream(["s", "x", "h"]), renderer)

        assert outcome.template == "bash"
        assert [v.buffer for v in renderer.views] == ["", "s", "s"]
        assert renderer.views[2].rejected

    def test_preset_then_live_input(self, root):
        live = iter(["p"])

        outcome = navigate(root, KeyStream(["gr"], lambda: next(live)), _RecordingRenderer())

        assert outcome.template == "git push"

    def test_cancel_mid_buffer(self, root):
        outcome = navigate(root, KeyStream(["g", "c", ESCAPE, "m"]), _RecordingRenderer())

        assert outcome == Cancelled(buffer="c")

    def test_exhausted_input_without_selection(self, root):
        with pytest.raises(IncompleteSelectionError) as exc_info:
            navigate(root, KeyStream(["gc"]), _RecordingRenderer())

        assert exc_info.value.buffer == "c"

    def test_no_input_at_all(self, root):
        with pytest.raises(IncompleteSelectionError):
            navigate(root, KeyStream([]), _RecordingRenderer())
