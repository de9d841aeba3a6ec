"""Generic reconciliation loop shared by every resource-backed task.

Each resource is inspected, classified, and then either left alone,
previewed (dry run), applied, or removed. The three entry points differ only
in where the state comes from and which action a fixable state leads to:

* ``process_resources`` queries each resource's state itself.
* ``process_resource_states`` takes states computed up front, typically
  from one bulk query.
* ``process_resources_remove`` undoes resources that are currently correct.

When the context allows parallelism and there is more than one resource,
each one is handled on its own thread and the per-resource counters are
merged under a lock. A failure to read state always aborts the pass; apply
failures abort it only when ``bail_on_error`` is set.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import TypeVar

from dotkit.errors import ResourceError
from dotkit.log.diagnostic import DiagEvent
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
    describe_state,
)
from dotkit.tasks.context import Context
from dotkit.tasks.stats import TaskStats

_T = TypeVar("_T")

UnitFn = Callable[[_T, threading.Event], TaskStats]


@dataclass(frozen=True)
class ProcessOpts:
    """Which states to fix and how to react to apply failures."""

    verb: str
    fix_incorrect: bool
    fix_missing: bool
    bail_on_error: bool

    @classmethod
    def apply_all(cls, verb: str) -> ProcessOpts:
        return cls(verb=verb, fix_incorrect=True, fix_missing=True, bail_on_error=True)

    @classmethod
    def install_missing(cls, verb: str) -> ProcessOpts:
        return cls(verb=verb, fix_incorrect=False, fix_missing=True, bail_on_error=False)

    def no_bail(self) -> ProcessOpts:
        return replace(self, bail_on_error=False)

    def skip_missing(self) -> ProcessOpts:
        return replace(self, fix_missing=False)


def process_resources(ctx: Context, resources: Iterable[Resource], opts: ProcessOpts) -> TaskStats:
    """Query each resource's state and reconcile it."""

    def unit(resource: Resource, abort: threading.Event) -> TaskStats:
        return process_single(ctx, resource, resource.current_state(), opts, abort)

    return _run_units(ctx, list(resources), unit)


def process_resource_states(
    ctx: Context,
    resource_states: Iterable[tuple[Resource, ResourceState]],
    opts: ProcessOpts,
) -> TaskStats:
    """Reconcile resources whose states were already computed."""

    def unit(item: tuple[Resource, ResourceState], abort: threading.Event) -> TaskStats:
        resource, state = item
        return process_single(ctx, resource, state, opts, abort)

    return _run_units(ctx, list(resource_states), unit)


def process_resources_remove(ctx: Context, resources: Iterable[Resource], verb: str) -> TaskStats:
    """Remove every resource that is currently in its correct state."""

    def unit(resource: Resource, abort: threading.Event) -> TaskStats:
        return remove_single(ctx, resource, verb, abort)

    return _run_units(ctx, list(resources), unit)


def process_single(
    ctx: Context,
    resource: Resource,
    state: ResourceState,
    opts: ProcessOpts,
    abort: threading.Event | None = None,
) -> TaskStats:
    desc = resource.description()
    _trace(ctx, DiagEvent.RES_CHECK, f"{desc}: {describe_state(state)}")

    if isinstance(state, Correct):
        ctx.log.debug(f"ok: {desc}")
        return TaskStats(already_ok=1)
    if isinstance(state, Invalid):
        ctx.log.debug(f"skipping {desc}: {state.reason}")
        return TaskStats(skipped=1)
    if isinstance(state, Missing) and not opts.fix_missing:
        return TaskStats(skipped=1)
    if isinstance(state, Incorrect) and not opts.fix_incorrect:
        ctx.log.debug(f"skipping {desc} (unexpected state)")
        return TaskStats(skipped=1)

    if ctx.dry_run:
        if isinstance(state, Incorrect):
            ctx.log.dry_run(f"would {opts.verb} {desc} (currently {state.current})")
        else:
            ctx.log.dry_run(f"would {opts.verb}: {desc}")
        return TaskStats(changed=1)

    if abort is not None and abort.is_set():
        return TaskStats(skipped=1)
    return apply_resource(ctx, resource, opts)


def apply_resource(ctx: Context, resource: Resource, opts: ProcessOpts) -> TaskStats:
    desc = resource.description()
    _trace(ctx, DiagEvent.RES_APPLY, desc)
    try:
        change = resource.apply()
    except Exception as exc:
        _trace(ctx, DiagEvent.RES_RESULT, f"{desc}: error: {exc}")
        if opts.bail_on_error:
            raise
        ctx.log.warn(f"failed to {opts.verb} {desc}: {exc}")
        return TaskStats(skipped=1)

    _trace(ctx, DiagEvent.RES_RESULT, f"{desc}: {_describe_change(change)}")
    if isinstance(change, Applied):
        ctx.log.debug(f"{opts.verb}: {desc}")
        return TaskStats(changed=1)
    if isinstance(change, AlreadyCorrect):
        return TaskStats(already_ok=1)
    if opts.bail_on_error:
        raise ResourceError(f"failed to {opts.verb} {desc}: {change.reason}")
    ctx.log.warn(f"failed to {opts.verb} {desc}: {change.reason}")
    return TaskStats(skipped=1)


def remove_single(
    ctx: Context,
    resource: Resource,
    verb: str,
    abort: threading.Event | None = None,
) -> TaskStats:
    desc = resource.description()
    state = resource.current_state()
    _trace(ctx, DiagEvent.RES_CHECK, f"{desc}: {describe_state(state)}")
    if not isinstance(state, Correct):
        return TaskStats(already_ok=1)
    if ctx.dry_run:
        ctx.log.dry_run(f"would {verb}: {desc}")
        return TaskStats(changed=1)
    if abort is not None and abort.is_set():
        return TaskStats(skipped=1)
    _trace(ctx, DiagEvent.RES_REMOVE, desc)
    try:
        resource.remove()
    except Exception as exc:
        _trace(ctx, DiagEvent.RES_RESULT, f"{desc}: error: {exc}")
        raise
    _trace(ctx, DiagEvent.RES_RESULT, f"{desc} removed")
    ctx.log.debug(f"{verb}: {desc}")
    return TaskStats(changed=1)


def _run_units(ctx: Context, items: list[_T], unit: UnitFn[_T]) -> TaskStats:
    if ctx.parallel and len(items) > 1:
        return _run_units_parallel(ctx, items, unit)
    abort = threading.Event()
    total = TaskStats()
    for item in items:
        total = total + unit(item, abort)
    return total


def _run_units_parallel(ctx: Context, items: list[_T], unit: UnitFn[_T]) -> TaskStats:
    """One thread per item; the first error is re-raised after all threads join.

    Once any unit fails, units that have not reached their mutation yet
    skip it. Units already mutating run to completion.
    """
    ctx.log.debug(f"processing {len(items)} resources in parallel")
    lock = threading.Lock()
    abort = threading.Event()
    errors: list[Exception] = []
    total = TaskStats()

    def worker(item: _T) -> None:
        nonlocal total
        try:
            delta = unit(item, abort)
        except Exception as exc:
            abort.set()
            with lock:
                errors.append(exc)
            return
        with lock:
            total = total + delta

    threads = [
        threading.Thread(target=worker, args=(item,), name=f"dotkit-resource-{index}", daemon=True)
        for index, item in enumerate(items)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    return total


def _trace(ctx: Context, event: DiagEvent, message: str) -> None:
    diagnostic = ctx.log.diagnostic
    if diagnostic is not None:
        diagnostic.emit(event, message, task=ctx.log.task_name)


def _describe_change(change: ResourceChange) -> str:
    if isinstance(change, Skipped):
        return f"skipped ({change.reason})"
    return "applied" if isinstance(change, Applied) else "already correct"
