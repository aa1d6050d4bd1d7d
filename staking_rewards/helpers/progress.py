"""Shared progress bar utilities for Rich console displays."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


def create_standard_progress(
    console: Console | None = None, *, expand: bool = False
) -> Progress:
    """Create a standard progress bar with time remaining estimation.

    Price lookups that miss the cache are throttled to one every few seconds,
    so the remaining-time estimate is the useful part of this display.

    Args:
        console: Rich console instance (optional)
        expand: Whether to expand the progress bar to full width

    Returns:
        Configured Progress instance with spinner, description, bar,
        M of N counter, time elapsed and time remaining
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        TextColumn("•"),
        TimeRemainingColumn(),
        console=console,
        expand=expand,
    )


@contextmanager
def track_progress(
    description: str,
    total: int,
    console: Console | None = None,
) -> Iterator[tuple[Progress, TaskID]]:
    """Context manager for tracking progress with automatic cleanup.

    Args:
        description: Task description to display
        total: Total number of items to process
        console: Rich console instance (optional)

    Yields:
        Tuple of (Progress instance, TaskID) for updating progress

    Example:
        ```python
        from staking_rewards.helpers.progress import track_progress

        with track_progress("Pricing withdrawals", total=len(records)) as (
            progress,
            task,
        ):
            for record in records:
                ...
                progress.update(task, advance=1)
        ```
    """
    progress = create_standard_progress(console)

    with progress:
        task_id = progress.add_task(description, total=total)
        yield progress, task_id


__all__ = [
    "TaskID",
    "create_standard_progress",
    "track_progress",
]
