"""cProfile hooks for copycheck.

Set COPYCHECK_PROFILE to a directory to collect profiles. Each run writes into its own
subdirectory named {timestamp_ms}_{main_pid}; the main process and every worker call drop
one .prof file there.
"""
import cProfile
import functools
import itertools
import os
import time
from pathlib import Path
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec('P')
T = TypeVar('T')

PROFILE_ENVIRONMENT_VARIABLE = 'COPYCHECK_PROFILE'
_SESSION_ENVIRONMENT_VARIABLE = '_COPYCHECK_PROFILE_SESSION_DIR'

_profile_counter = itertools.count()


def get_profile_dir() -> Path | None:
    """Directory for this run's profiles, or None when profiling is disabled."""
    profile_path = os.environ.get(PROFILE_ENVIRONMENT_VARIABLE)
    if not profile_path:
        return None
    return Path(profile_path) / _get_session_dir_name()


def _get_session_dir_name() -> str:
    # Workers inherit the name chosen by profile_main through the environment.
    session_dir = os.environ.get(_SESSION_ENVIRONMENT_VARIABLE)
    if session_dir:
        return session_dir
    return f"{int(time.time() * 1000)}_{os.getpid()}"


def generate_profile_filename(prefix: str = "profile") -> str:
    """Return a name like "worker_54398_0.prof", unique within this process."""
    return f"{prefix}_{os.getpid()}_{next(_profile_counter)}.prof"


def profile_function(func: Callable[P, T], prefix: str = "profile") -> Callable[P, T]:
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        profile_dir = get_profile_dir()
        if profile_dir is None:
            return func(*args, **kwargs)

        profile_dir.mkdir(parents=True, exist_ok=True)
        profile_file = profile_dir / generate_profile_filename(prefix)

        profiler = cProfile.Profile()
        try:
            profiler.enable()
            return func(*args, **kwargs)
        finally:
            profiler.disable()
            profiler.dump_stats(str(profile_file))

    return wrapper


def profile_main(func: Callable[P, T]) -> Callable[P, T]:
    """Profile the entry point and pin the session directory for worker processes."""
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        if os.environ.get(PROFILE_ENVIRONMENT_VARIABLE):
            os.environ[_SESSION_ENVIRONMENT_VARIABLE] = _get_session_dir_name()

        return profile_function(func, prefix="main")(*args, **kwargs)

    return wrapper


def profile_worker(func: Callable[P, T]) -> Callable[P, T]:
    return profile_function(func, prefix="worker")
