"""Tests for frictionpm/tasks/resolver.py

The resolver turns a project's tasks into roots + children + orphans.
It must never fail on malformed graphs: self-loops, cycles and dangling
blockedBy ids all have to come back as something displayable.
"""

from frictionpm.tasks.friction import FrictionLevel
from frictionpm.tasks.resolver import (
    is_effectively_blocked,
    lowest_friction_task,
    possible_blockers,
    resolve,
    unblocked_tasks,
)


def _ids(tasks):
    return [t.id for t in tasks]


# ─────────────────────────────────────────────────────────────────────────────
# Effective block status
# ─────────────────────────────────────────────────────────────────────────────


class TestEffectivelyBlocked:
    def test_unset_blocker_is_unblocked(self, make_task):
        a = make_task("a")
        assert is_effectively_blocked(a, [a]) is False

    def test_open_blocker_blocks(self, make_task):
        a = make_task("a")
        b = make_task("b", blocked_by="a")
        assert is_effectively_blocked(b, [a, b]) is True

    def test_completed_blocker_is_inert(self, make_task):
        a = make_task("a", completed=True)
        b = make_task("b", blocked_by="a")
        assert is_effectively_blocked(b, [a, b]) is False
        assert b.blocked_by == "a"

    def test_missing_blocker_is_inert(self, make_task):
        b = make_task("b", blocked_by="deleted")
        assert is_effectively_blocked(b, [b]) is False
        assert b.blocked_by == "deleted"


# ─────────────────────────────────────────────────────────────────────────────
# Forest construction
# ─────────────────────────────────────────────────────────────────────────────


class TestResolve:
    def test_roots_sorted_oldest_first(self, make_task):
        a = make_task("a", created_at=30)
        b = make_task("b", created_at=10)
        c = make_task("c", created_at=20)

        forest = resolve([a, b, c])

        assert [n.task.id for n in forest.roots] == ["b", "c", "a"]
        assert forest.orphans == []

    def test_children_attached_depth_first(self, make_task):
        root = make_task("root")
        child = make_task("child", blocked_by="root")
        grandchild = make_task("grandchild", blocked_by="child")
        other = make_task("other")

        forest = resolve([grandchild, child, root, other])

        rows = forest.flatten()
        assert [(r["task"].id, r["depth"]) for r in rows] == [
            ("root", 0),
            ("child", 1),
            ("grandchild", 2),
            ("other", 0),
        ]

    def test_completed_tasks_excluded(self, make_task):
        done = make_task("done", completed=True)
        after = make_task("after", blocked_by="done")

        forest = resolve([done, after])

        assert [n.task.id for n in forest.roots] == ["after"]
        assert forest.roots[0].children == []

    def test_two_node_cycle_becomes_orphans(self, make_task):
        a = make_task("a", blocked_by="b")
        b = make_task("b", blocked_by="a")

        forest = resolve([a, b])

        assert forest.roots == []
        assert sorted(_ids(forest.orphans)) == ["a", "b"]
        assert len(forest.orphans) == 2

    def test_self_loop_is_orphan(self, make_task):
        a = make_task("a", blocked_by="a")

        forest = resolve([a])

        assert forest.roots == []
        assert _ids(forest.orphans) == ["a"]

    def test_chain_hanging_off_cycle_is_orphaned(self, make_task):
        a = make_task("a", blocked_by="b")
        b = make_task("b", blocked_by="a")
        c = make_task("c", blocked_by="a")
        free = make_task("free")

        forest = resolve([a, b, c, free])

        assert [n.task.id for n in forest.roots] == ["free"]
        assert sorted(_ids(forest.orphans)) == ["a", "b", "c"]

    def test_every_open_task_appears_exactly_once(self, make_task):
        tasks = [
            make_task("a"),
            make_task("b", blocked_by="a"),
            make_task("c", blocked_by="d"),
            make_task("d", blocked_by="c"),
            make_task("e", blocked_by="missing"),
            make_task("f", blocked_by="f"),
        ]

        rows = resolve(tasks).flatten()

        assert sorted(r["task"].id for r in rows) == ["a", "b", "c", "d", "e", "f"]

    def test_orphans_flagged_at_root_depth(self, make_task):
        a = make_task("a", blocked_by="b")
        b = make_task("b", blocked_by="a")

        rows = resolve([a, b]).flatten()

        assert all(r["orphan"] and r["depth"] == 0 for r in rows)

    def test_empty_input(self):
        forest = resolve([])
        assert forest.roots == []
        assert forest.orphans == []
        assert forest.suggestion is None

    def test_to_dict_shape(self, make_task):
        a = make_task("a")
        b = make_task("b", blocked_by="a")

        data = resolve([a, b]).to_dict()

        assert data["roots"][0]["task"]["id"] == "a"
        assert data["roots"][0]["children"][0]["task"]["id"] == "b"
        assert data["roots"][0]["children"][0]["depth"] == 1
        assert data["suggestion"]["id"] == "a"


# ─────────────────────────────────────────────────────────────────────────────
# Lowest-friction suggestion
# ─────────────────────────────────────────────────────────────────────────────


class TestLowestFriction:
    def test_picks_cheapest_unblocked(self, make_task):
        hard = make_task("hard", friction=FrictionLevel.HIGH)
        easy_blocked = make_task("easy", friction=FrictionLevel.NONE, blocked_by="hard")
        medium = make_task("medium", friction=FrictionLevel.MODERATE)

        assert lowest_friction_task([hard, easy_blocked, medium]).id == "medium"

    def test_ties_go_to_oldest(self, make_task):
        newer = make_task("newer", friction=FrictionLevel.LOW, created_at=200)
        older = make_task("older", friction=FrictionLevel.LOW, created_at=100)

        assert lowest_friction_task([newer, older]).id == "older"

    def test_none_when_everything_blocked(self, make_task):
        a = make_task("a", blocked_by="b")
        b = make_task("b", blocked_by="a")

        assert lowest_friction_task([a, b]) is None
        assert resolve([a, b]).suggestion is None

    def test_ignores_completed(self, make_task):
        done = make_task("done", friction=FrictionLevel.NONE, completed=True)
        open_task = make_task("open", friction=FrictionLevel.HIGH)

        assert lowest_friction_task([done, open_task]).id == "open"

    def test_unblocked_subset(self, make_task):
        a = make_task("a")
        b = make_task("b", blocked_by="a")
        c = make_task("c", blocked_by="gone")

        assert _ids(unblocked_tasks([a, b, c])) == ["a", "c"]


class TestPossibleBlockers:
    def test_excludes_self_completed_and_other_projects(self, make_task):
        me = make_task("me")
        sibling = make_task("sibling")
        done = make_task("done", completed=True)
        elsewhere = make_task("elsewhere", project_id="p2")

        candidates = possible_blockers(me, [me, sibling, done, elsewhere])

        assert _ids(candidates) == ["sibling"]
