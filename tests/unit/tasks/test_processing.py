"""Unit tests for the generic reconciliation loop."""

from __future__ import annotations

import re
import threading
import time
from collections.abc import Callable

import pytest

from dotkit.errors import PermissionDeniedError, ResourceError
from dotkit.log.logger import Logger
from dotkit.resources.base import (
    AlreadyCorrect,
    Applied,
    Correct,
    Incorrect,
    Invalid,
    Missing,
    Resource,
    ResourceChange,
    ResourceState,
    Skipped,
)
from dotkit.tasks.context import Context
from dotkit.tasks.processing import (
    ProcessOpts,
    process_resource_states,
    process_resources,
    process_resources_remove,
    process_single,
    remove_single,
)
from dotkit.tasks.stats import TaskStats


class _FakeResource(Resource):
    def __init__(
        self,
        name: str,
        state: ResourceState,
        *,
        change: ResourceChange | None = None,
        apply_error: Exception | None = None,
        state_error: Exception | None = None,
    ) -> None:
        self.name = name
        self.state = state
        self.change = change or Applied()
        self.apply_error = apply_error
        self.state_error = state_error
        self.applied = 0
        self.removed = 0

    def description(self) -> str:
        return self.name

    def current_state(self) -> ResourceState:
        if self.state_error is not None:
            raise self.state_error
        return self.state

    def apply(self) -> ResourceChange:
        self.applied += 1
        if self.apply_error is not None:
            raise self.apply_error
        return self.change

    def remove(self) -> ResourceChange:
        self.removed += 1
        return Applied()


def test_process_opts_presets() -> None:
    assert ProcessOpts.apply_all("link") == ProcessOpts("link", True, True, True)
    assert ProcessOpts.install_missing("install") == ProcessOpts("install", False, True, False)
    assert ProcessOpts.apply_all("link").no_bail().bail_on_error is False
    assert ProcessOpts.apply_all("link").skip_missing().fix_missing is False


@pytest.mark.parametrize(
    ("state", "opts", "expected", "applied"),
    [
        (Correct(), ProcessOpts.apply_all("link"), TaskStats(already_ok=1), 0),
        (Invalid("source missing"), ProcessOpts.apply_all("link"), TaskStats(skipped=1), 0),
        (Missing(), ProcessOpts.apply_all("link").skip_missing(), TaskStats(skipped=1), 0),
        (Incorrect("points to /x"), ProcessOpts.install_missing("install"), TaskStats(skipped=1), 0),
        (Missing(), ProcessOpts.apply_all("link"), TaskStats(changed=1), 1),
        (Incorrect("points to /x"), ProcessOpts.apply_all("link"), TaskStats(changed=1), 1),
    ],
)
def test_decision_table(
    make_context: Callable[..., Context],
    state: ResourceState,
    opts: ProcessOpts,
    expected: TaskStats,
    applied: int,
) -> None:
    resource = _FakeResource("r", state)
    assert process_resources(make_context(), [resource], opts) == expected
    assert resource.applied == applied


def test_mixed_states_real_run(make_context: Callable[..., Context]) -> None:
    resources = [
        _FakeResource("a", Correct()),
        _FakeResource("b", Missing()),
        _FakeResource("c", Incorrect("points to X")),
    ]
    stats = process_resources(make_context(), resources, ProcessOpts.apply_all("link"))
    assert stats == TaskStats(changed=2, already_ok=1)
    assert [r.applied for r in resources] == [0, 1, 1]


def test_dry_run_never_applies(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    resources = [
        _FakeResource("a", Correct()),
        _FakeResource("b", Missing()),
        _FakeResource("c", Incorrect("points to X")),
    ]
    stats = process_resources(make_context(dry_run=True), resources, ProcessOpts.apply_all("link"))
    assert stats == TaskStats(changed=2, already_ok=1)
    assert all(r.applied == 0 for r in resources)
    output = console_output()
    assert "would link: b" in output
    assert "would link c (currently points to X)" in output


def test_apply_outcomes_are_counted(make_context: Callable[..., Context]) -> None:
    resources = [
        _FakeResource("applied", Missing(), change=Applied()),
        _FakeResource("raced", Missing(), change=AlreadyCorrect()),
    ]
    stats = process_resources(make_context(), resources, ProcessOpts.apply_all("link"))
    assert stats == TaskStats(changed=1, already_ok=1)


def test_apply_error_bails_when_requested(make_context: Callable[..., Context]) -> None:
    resource = _FakeResource("x", Missing(), apply_error=PermissionDeniedError("/x"))
    with pytest.raises(PermissionDeniedError, match="denied"):
        process_resources(make_context(), [resource], ProcessOpts.apply_all("link"))


def test_apply_error_downgrades_without_bail(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    resources = [
        _FakeResource("x", Missing(), apply_error=PermissionDeniedError("/x")),
        _FakeResource("y", Missing()),
    ]
    stats = process_resources(make_context(), resources, ProcessOpts.apply_all("link").no_bail())
    assert stats == TaskStats(changed=1, skipped=1)
    assert "failed to link x: permission denied: /x" in console_output()


def test_skipped_change_bails_or_warns(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    resource = _FakeResource("ext", Missing(), change=Skipped("exit 1"))
    with pytest.raises(ResourceError, match="failed to install ext: exit 1"):
        process_resources(make_context(), [resource], ProcessOpts.apply_all("install"))

    stats = process_resources(make_context(), [resource], ProcessOpts.install_missing("install"))
    assert stats == TaskStats(skipped=1)
    assert "failed to install ext: exit 1" in console_output()


@pytest.mark.parametrize("parallel", [False, True])
def test_state_query_error_aborts_even_without_bail(
    make_context: Callable[..., Context],
    parallel: bool,
) -> None:
    resources = [
        _FakeResource("ok", Missing()),
        _FakeResource("broken", Missing(), state_error=ResourceError("pacman exploded")),
    ]
    opts = ProcessOpts.apply_all("install").no_bail()
    with pytest.raises(ResourceError, match="pacman exploded"):
        process_resources(make_context(parallel=parallel), resources, opts)


def test_precomputed_states_are_not_requeried(make_context: Callable[..., Context]) -> None:
    resource = _FakeResource("pkg", Missing(), state_error=AssertionError("queried"))
    stats = process_resource_states(make_context(), [(resource, Missing())], ProcessOpts.apply_all("install"))
    assert stats == TaskStats(changed=1)
    assert resource.applied == 1


def test_parallel_matches_sequential(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    def build() -> list[_FakeResource]:
        states: list[ResourceState] = [Correct(), Missing(), Incorrect("old"), Invalid("nope")] * 5
        return [_FakeResource(f"r{i}", state) for i, state in enumerate(states)]

    opts = ProcessOpts.apply_all("link")
    sequential = process_resources(make_context(parallel=False), build(), opts)
    parallel_resources = build()
    parallel = process_resources(make_context(parallel=True), parallel_resources, opts)
    assert parallel == sequential == TaskStats(changed=10, already_ok=5, skipped=5)
    assert sum(r.applied for r in parallel_resources) == 10
    assert "processing 20 resources in parallel" in console_output()


def test_parallel_bail_reraises_first_error(make_context: Callable[..., Context]) -> None:
    resources = [_FakeResource(f"ok{i}", Missing()) for i in range(5)]
    resources.append(_FakeResource("bad", Missing(), apply_error=PermissionDeniedError("/bad")))
    with pytest.raises(PermissionDeniedError):
        process_resources(make_context(parallel=True), resources, ProcessOpts.apply_all("link"))


def test_remove_only_targets_correct_resources(make_context: Callable[..., Context]) -> None:
    resources = [
        _FakeResource("a", Correct()),
        _FakeResource("b", Missing()),
        _FakeResource("c", Incorrect("points to X")),
    ]
    stats = process_resources_remove(make_context(), resources, "unlink")
    assert stats == TaskStats(changed=1, already_ok=2)
    assert [r.removed for r in resources] == [1, 0, 0]


def test_remove_dry_run_previews_only(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    resources = [_FakeResource("a", Correct()), _FakeResource("b", Missing())]
    stats = process_resources_remove(make_context(dry_run=True, parallel=True), resources, "unlink")
    assert stats == TaskStats(changed=1, already_ok=1)
    assert all(r.removed == 0 for r in resources)
    assert "would unlink: a" in console_output()


@pytest.mark.parametrize("parallel", [False, True])
def test_remove_leaves_invalid_missing_and_incorrect_alone(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
    parallel: bool,
) -> None:
    resources = [
        _FakeResource("a", Correct()),
        _FakeResource("b", Missing()),
        _FakeResource("c", Incorrect("points to X")),
        _FakeResource("d", Invalid("source missing")),
        _FakeResource("e", Correct()),
    ]
    stats = process_resources_remove(make_context(parallel=parallel), resources, "unlink")
    assert stats == TaskStats(changed=2, already_ok=3)
    assert [r.removed for r in resources] == [1, 0, 0, 0, 1]
    assert all(r.applied == 0 for r in resources)
    output = console_output()
    assert "unlink: a" in output
    assert "unlink: e" in output


def test_remove_traces_a_result_event(
    make_context: Callable[..., Context],
    logger: Logger,
) -> None:
    process_resources_remove(make_context(), [_FakeResource("~/.bashrc", Correct())], "unlink")
    assert logger.diagnostic is not None
    trace = logger.diagnostic.path.read_text(encoding="utf-8")
    assert "RES_REMOVE" in trace
    assert re.search(r"RES_RESULT\s+~/\.bashrc removed", trace)


def test_applied_resource_logs_debug_line(
    make_context: Callable[..., Context],
    console_output: Callable[[], str],
) -> None:
    process_resources(make_context(), [_FakeResource("~/.vimrc", Missing())], ProcessOpts.apply_all("link"))
    assert "link: ~/.vimrc" in console_output()


def test_set_abort_skips_mutation(make_context: Callable[..., Context]) -> None:
    abort = threading.Event()
    abort.set()
    ctx = make_context()
    fixable = _FakeResource("fix", Missing())
    removable = _FakeResource("rm", Correct())
    assert process_single(ctx, fixable, Missing(), ProcessOpts.apply_all("link"), abort) == TaskStats(skipped=1)
    assert remove_single(ctx, removable, "unlink", abort) == TaskStats(skipped=1)
    assert fixable.applied == 0
    assert removable.removed == 0


def test_parallel_bail_stops_units_that_start_after_failure(make_context: Callable[..., Context]) -> None:
    failed = threading.Event()

    class _Failing(_FakeResource):
        def apply(self) -> ResourceChange:
            self.applied += 1
            failed.set()
            raise PermissionDeniedError("/bad")

    class _Late(_FakeResource):
        def current_state(self) -> ResourceState:
            assert failed.wait(timeout=5)
            # Let the failing worker record its error before this unit mutates.
            time.sleep(0.2)
            return self.state

    late = [_Late(f"late{i}", Missing()) for i in range(4)]
    resources: list[_FakeResource] = [_Failing("bad", Missing()), *late]
    with pytest.raises(PermissionDeniedError):
        process_resources(make_context(parallel=True), resources, ProcessOpts.apply_all("link"))
    assert resources[0].applied == 1
    assert [r.applied for r in late] == [0, 0, 0, 0]
